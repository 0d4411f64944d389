"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import User, UserRole, WorkingHours
from .domain.suggestion_engine import SuggestionEngine


class ClinicConfig(BaseModel):
    """Bookable grid and suggestion tuning."""
    start_hour: int = 8
    end_hour: int = 20
    optimal_start_hour: int = 9
    optimal_end_hour: int = 17
    off_weekdays: List[int] = Field(default_factory=lambda: [6])  # Sunday
    window_days: int = 7
    slot_step_minutes: int = 30
    collect_limit: Optional[int] = 5
    max_suggestions: int = 3

    @field_validator("start_hour", "optimal_start_hour", "optimal_end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {v}")
        return v

    @field_validator("end_hour")
    @classmethod
    def validate_end_hour(cls, v: int) -> int:
        """The closing hour may be midnight (24)."""
        if not 1 <= v <= 24:
            raise ValueError(f"end_hour must be between 1 and 24, got {v}")
        return v

    @field_validator("off_weekdays")
    @classmethod
    def validate_off_weekdays(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"off_weekdays must be between 0 and 6, got {invalid_days}")
        # Preserve order while removing duplicates
        seen: set[int] = set()
        deduped: List[int] = []
        for day in value:
            if day not in seen:
                deduped.append(day)
                seen.add(day)
        return deduped

    @field_validator("window_days", "max_suggestions")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    @field_validator("slot_step_minutes")
    @classmethod
    def validate_step(cls, value: int) -> int:
        if not 0 < value <= 60:
            raise ValueError(f"slot_step_minutes must be between 1 and 60, got {value}")
        return value

    @field_validator("collect_limit")
    @classmethod
    def validate_collect_limit(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ValueError("collect_limit must be greater than zero or null")
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "ClinicConfig":
        """Ensure the configured window opens before it closes."""
        if self.end_hour <= self.start_hour:
            raise ValueError("end_hour must be later than start_hour")
        if self.optimal_end_hour < self.optimal_start_hour:
            raise ValueError("optimal_end_hour must not be earlier than optimal_start_hour")
        return self

    def to_working_hours(self) -> WorkingHours:
        return WorkingHours(
            start_hour=self.start_hour,
            end_hour=self.end_hour,
            exclude_weekdays=list(self.off_weekdays),
            optimal_start_hour=self.optimal_start_hour,
            optimal_end_hour=self.optimal_end_hour,
        )

    def build_engine(self) -> SuggestionEngine:
        return SuggestionEngine(
            working_hours=self.to_working_hours(),
            window_days=self.window_days,
            slot_step_minutes=self.slot_step_minutes,
            collect_limit=self.collect_limit,
            max_suggestions=self.max_suggestions,
        )


class DefaultsConfig(BaseModel):
    """Default settings for suggestions and booking."""
    duration_minutes: int = 60

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure session duration is positive."""
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value


class UserAccount(BaseModel):
    """Demo login account."""
    id: str
    username: str
    password: str
    role: UserRole
    full_name: Optional[str] = None

    def to_user(self) -> User:
        return User(id=self.id, username=self.username, role=self.role, full_name=self.full_name)


def _demo_accounts() -> List[UserAccount]:
    return [
        UserAccount(id="1", username="patient", password="demo", role=UserRole.PATIENT, full_name="Sarah Johnson"),
        UserAccount(
            id="2",
            username="practitioner",
            password="demo",
            role=UserRole.PRACTITIONER,
            full_name="Dr. Priya Sharma",
        ),
    ]


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/Berlin"
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".clinicslots")
    clinic: ClinicConfig = Field(default_factory=ClinicConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    users: List[UserAccount] = Field(default_factory=_demo_accounts)

    @field_validator("data_dir")
    @classmethod
    def expand_data_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("users")
    @classmethod
    def validate_users(cls, value: List[UserAccount]) -> List[UserAccount]:
        """Ensure usernames and ids are unique."""
        seen_names: set[str] = set()
        seen_ids: set[str] = set()
        for account in value:
            name_key = account.username.lower()
            if name_key in seen_names:
                raise ValueError(f"Duplicate username detected: {account.username}")
            if account.id in seen_ids:
                raise ValueError(f"Duplicate user id detected: {account.id}")
            seen_names.add(name_key)
            seen_ids.add(account.id)
        return value

    @property
    def appointments_file(self) -> Path:
        return self.data_dir / "appointments.json"

    @property
    def session_file(self) -> Path:
        return self.data_dir / "session.json"

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "AppConfig":
        """
        Load an explicit config file, else the default one if present,
        else built-in defaults.
        """
        if config_path is not None:
            return cls.load_from_yaml(config_path)

        default_path = get_default_config_path()
        if default_path.exists():
            return cls.load_from_yaml(default_path)

        return cls()

    def find_account(self, username: str) -> UserAccount | None:
        """Find a login account by its exact username."""
        for account in self.users:
            if account.username == username:
                return account
        return None


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
