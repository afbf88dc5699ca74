"""Configuration for todo-planner."""

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from todo_planner.models import Priority

DATE_PLACEHOLDER = "%date%"


class PriorityThresholds(BaseModel):
    """Minimum subtask count for each automatic tier (D is the fallback)."""

    model_config = ConfigDict(frozen=True)

    priority_a: int = 6
    priority_b: int = 4
    priority_c: int = 2

    @model_validator(mode="after")
    def _check_order(self) -> "PriorityThresholds":
        if self.priority_c < 0:
            raise ValueError("priority_c threshold must not be negative")
        if not self.priority_a >= self.priority_b >= self.priority_c:
            raise ValueError(
                "thresholds must satisfy priority_a >= priority_b >= priority_c, got "
                f"{self.priority_a}/{self.priority_b}/{self.priority_c}"
            )
        return self


def _default_time_allocation() -> dict[Priority, int]:
    # A: 1h block for 2 tasks, B: 2h for 4, C: 1h for 6, D: 1h for 1
    return {Priority.A: 30, Priority.B: 30, Priority.C: 10, Priority.D: 60}


class PlannerConfig(BaseSettings):
    """Settings consumed by the parsing and analysis functions."""

    model_config = SettingsConfigDict(
        env_prefix="TODO_PLANNER_",
        env_nested_delimiter="__",
        frozen=True,
    )

    thresholds: PriorityThresholds = Field(default_factory=PriorityThresholds)
    time_allocation: dict[Priority, int] = Field(default_factory=_default_time_allocation)
    reschedule_warning_threshold: int = Field(default=3, ge=1)
    date_tag_format: str = Field(default="#%date%")
    date_format: str = Field(default="%Y-%m-%d")
    vault_path: str = Field(default=".")
    notes_folder: str = Field(default="")

    @field_validator("time_allocation")
    @classmethod
    def _check_time_allocation(cls, value: dict[Priority, int]) -> dict[Priority, int]:
        missing = [p.value for p in Priority if p not in value]
        if missing:
            raise ValueError(f"time_allocation is missing tiers: {', '.join(missing)}")
        for priority, minutes in value.items():
            if minutes <= 0:
                raise ValueError(f"time_allocation for {priority.value} must be positive")
        return value

    @field_validator("date_tag_format")
    @classmethod
    def _check_date_tag_format(cls, value: str) -> str:
        if DATE_PLACEHOLDER not in value:
            raise ValueError(f"date_tag_format must contain {DATE_PLACEHOLDER}")
        return value

    def minutes_for(self, priority: Priority) -> int:
        """Fixed per-task time allocation for a tier."""
        return self.time_allocation[priority]


# Built-in defaults only; model_construct skips the environment lookup
DEFAULT_CONFIG = PlannerConfig.model_construct()


def load_config(path: str | Path | None = None) -> PlannerConfig:
    """Load configuration from a YAML file, falling back to defaults.

    Environment variables (``TODO_PLANNER_*``) apply to fields the file does
    not set.

    Raises:
        FileNotFoundError: If ``path`` is given but does not exist
        ValueError: If the file is not valid YAML or not a mapping
    """
    if path is None:
        return PlannerConfig()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config {config_path}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config {config_path} must be a mapping")

    return PlannerConfig(**data)
