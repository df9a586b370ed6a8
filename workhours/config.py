"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Dict, List, Literal, Optional, Sequence

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import UnavailableHour

Environment = Literal["production", "staging"]


class Endpoints(BaseModel):
    """Remote API endpoints for one environment."""
    events: str
    business_hours: str


ENVIRONMENT_ENDPOINTS: Dict[str, Endpoints] = {
    "production": Endpoints(
        events="https://schedule.setmore.com/schedule/v1/events",
        business_hours="https://api.anywhereworks.com/api/v1/awhours",
    ),
    "staging": Endpoints(
        events="https://dev.setmore.info/schedule/v1/events",
        business_hours="https://api.staging.anywhereworks.com/api/v1/awhours",
    ),
}


class HttpConfig(BaseModel):
    """Transport settings for the API client."""
    timeout_seconds: float = 30
    max_retries: int = 2
    retry_delay_seconds: float = 2
    auth_retry_delay_seconds: float = 5
    page_limit: int = 500

    @field_validator("timeout_seconds", "page_limit")
    @classmethod
    def validate_positive(cls, value):
        if value <= 0:
            raise ValueError(f"Value must be greater than zero, got {value}")
        return value

    @field_validator("max_retries", "retry_delay_seconds", "auth_retry_delay_seconds")
    @classmethod
    def validate_not_negative(cls, value):
        if value < 0:
            raise ValueError(f"Value must not be negative, got {value}")
        return value


class HourRange(BaseModel):
    """A whole-hour range used for the fallback unavailability policy."""
    start: int
    end: int

    @model_validator(mode="after")
    def validate_bounds(self) -> "HourRange":
        if not 0 <= self.start < self.end <= 24:
            raise ValueError(
                f"Hour range must satisfy 0 <= start < end <= 24, got {self.start}-{self.end}"
            )
        return self

    def to_unavailable_hour(self) -> UnavailableHour:
        return UnavailableHour(start=self.start, end=self.end)


def _default_fallback() -> List[HourRange]:
    return [HourRange(start=0, end=8), HourRange(start=20, end=24)]


class Provider(BaseModel):
    """Provider (calendar owner) configuration."""
    id: str
    name: str = ""  # Optional alias

    def display_name(self) -> str:
        return self.name or self.id


class AppConfig(BaseModel):
    """Application configuration."""
    environment: Environment = "production"
    endpoints: Optional[Endpoints] = None  # Overrides the environment's endpoints
    account_id: str = ""
    brand_id: str = ""
    provider_ids: List[str] = Field(default_factory=list)
    calendar_ids: List[str] = Field(default_factory=list)
    providers: List[Provider] = Field(default_factory=list)
    timezone: str = "Asia/Kolkata"
    http: HttpConfig = Field(default_factory=HttpConfig)
    # Applied by the service when no provider has working hours at all
    fallback_unavailable_hours: List[HourRange] = Field(default_factory=_default_fallback)

    @field_validator("provider_ids")
    @classmethod
    def validate_provider_ids(cls, value: List[str]) -> List[str]:
        """Drop blanks and duplicates, preserving order."""
        seen: set[str] = set()
        deduped: List[str] = []
        for provider_id in value:
            provider_id = provider_id.strip()
            if provider_id and provider_id not in seen:
                deduped.append(provider_id)
                seen.add(provider_id)
        return deduped

    @field_validator("providers")
    @classmethod
    def validate_providers(cls, value: List[Provider]) -> List[Provider]:
        """Ensure provider ids and aliases are unique."""
        seen_ids: set[str] = set()
        seen_names: set[str] = set()
        for provider in value:
            name_key = provider.name.lower()
            if provider.id in seen_ids:
                raise ValueError(f"Duplicate provider id detected: {provider.id}")
            if name_key and name_key in seen_names:
                raise ValueError(f"Duplicate provider name detected: {provider.name}")
            seen_ids.add(provider.id)
            if name_key:
                seen_names.add(name_key)
        return value

    def get_endpoints(self) -> Endpoints:
        """Endpoints for the configured environment, unless overridden."""
        return self.endpoints or ENVIRONMENT_ENDPOINTS[self.environment]

    def get_fallback_unavailable_hours(self) -> List[UnavailableHour]:
        return [hour_range.to_unavailable_hour() for hour_range in self.fallback_unavailable_hours]

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

    def find_provider(self, identifier: str) -> Provider | None:
        """Find a configured provider by id or alias."""
        for provider in self.providers:
            if provider.id == identifier or (
                provider.name and provider.name.lower() == identifier.lower()
            ):
                return provider
        return None

    def resolve_provider(self, identifier: str) -> str:
        """
        Resolve a provider alias to its id.

        Unknown identifiers are taken as raw provider ids.
        """
        provider = self.find_provider(identifier)
        return provider.id if provider else identifier

    def resolve_providers(self, identifiers: Sequence[str]) -> List[str]:
        """
        Resolve several identifiers, falling back to the configured provider ids.

        Raises:
            ValueError: If nothing is given and no providers are configured
        """
        if not identifiers:
            configured = self.provider_ids or [p.id for p in self.providers]
            if not configured:
                raise ValueError(
                    "No providers given. Pass provider ids or set provider_ids in the config."
                )
            return list(configured)

        resolved: List[str] = []
        for identifier in identifiers:
            provider_id = self.resolve_provider(identifier)
            if provider_id not in resolved:
                resolved.append(provider_id)
        return resolved


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
