"""Honeycomb environment configuration and the registry built from it."""

import json
from pathlib import Path
from types import MappingProxyType
from typing import List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from .exceptions import ConfigurationError, UnknownEnvironment
from .settings import DEFAULT_HONEYCOMB_API_ENDPOINT, Settings
from .utils.pylogger import get_python_logger

logger = get_python_logger()

DEFAULT_CONFIG_FILENAME = ".mcp-honeycomb.json"


class HoneycombEnvironment(BaseModel):
    """A named Honeycomb team/region: where to send requests and with which key."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    base_url: str = Field(default=DEFAULT_HONEYCOMB_API_ENDPOINT, alias="baseUrl")
    api_key: str = Field(min_length=1, alias="apiKey", repr=False)

    @field_validator("base_url", mode="before")
    @classmethod
    def _default_base_url(cls, value: Optional[str]) -> str:
        if not value:
            return DEFAULT_HONEYCOMB_API_ENDPOINT
        return value.rstrip("/")


class HoneycombConfig(BaseModel):
    environments: List[HoneycombEnvironment] = Field(min_length=1)

    @field_validator("environments")
    @classmethod
    def _unique_names(cls, value: List[HoneycombEnvironment]) -> List[HoneycombEnvironment]:
        seen = set()
        for env in value:
            if env.name in seen:
                raise ValueError(f"duplicate environment name: {env.name}")
            seen.add(env.name)
        return value


class EnvironmentRegistry:
    """Read-only lookup of environments by name.

    Built once at startup and shared by every request; never mutated.
    """

    def __init__(self, config: HoneycombConfig) -> None:
        self._environments: Mapping[str, HoneycombEnvironment] = MappingProxyType(
            {env.name: env for env in config.environments}
        )

    def get(self, name: str) -> HoneycombEnvironment:
        try:
            return self._environments[name]
        except KeyError:
            raise UnknownEnvironment(name, self.names()) from None

    def names(self) -> List[str]:
        return list(self._environments.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._environments

    def __len__(self) -> int:
        return len(self._environments)


def _load_config_file(path: Path) -> HoneycombConfig:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Cannot read Honeycomb config file {path}: {e}", config_key="HONEYCOMB_CONFIG_PATH")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in Honeycomb config file {path}: {e}", config_key="HONEYCOMB_CONFIG_PATH")

    try:
        return HoneycombConfig.model_validate(raw)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid Honeycomb config in {path}: {e}", config_key="HONEYCOMB_CONFIG_PATH")


def load_config(settings: Settings, cwd: Optional[Path] = None) -> HoneycombConfig:
    """Resolve environments from a config file or the single-key env vars.

    Order: HONEYCOMB_CONFIG_PATH, then .mcp-honeycomb.json in the working
    directory, then HONEYCOMB_API_KEY.
    """
    if settings.HONEYCOMB_CONFIG_PATH:
        path = Path(settings.HONEYCOMB_CONFIG_PATH).expanduser()
        logger.info("Loading Honeycomb environments", source=str(path))
        return _load_config_file(path)

    default_path = (cwd or Path.cwd()) / DEFAULT_CONFIG_FILENAME
    if default_path.exists():
        logger.info("Loading Honeycomb environments", source=str(default_path))
        return _load_config_file(default_path)

    if settings.HONEYCOMB_API_KEY:
        logger.info("Using single Honeycomb environment", environment=settings.HONEYCOMB_ENVIRONMENT)
        try:
            return HoneycombConfig(
                environments=[
                    HoneycombEnvironment(
                        name=settings.HONEYCOMB_ENVIRONMENT,
                        base_url=settings.HONEYCOMB_API_ENDPOINT,
                        api_key=settings.HONEYCOMB_API_KEY,
                    )
                ]
            )
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid Honeycomb environment settings: {e}", config_key="HONEYCOMB_API_KEY")

    raise ConfigurationError(
        "No Honeycomb environments configured. Set HONEYCOMB_CONFIG_PATH or HONEYCOMB_API_KEY.",
        config_key="HONEYCOMB_API_KEY",
    )


def build_registry(settings: Settings, cwd: Optional[Path] = None) -> EnvironmentRegistry:
    return EnvironmentRegistry(load_config(settings, cwd))
