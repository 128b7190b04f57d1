"""Unified settings for hypermedia codecs."""

import importlib.metadata
import tomllib
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

NESTING_DEPTH_CEILING = 256


def read_pyproject(pyproject_path: Path) -> dict:
    """Read pyproject.toml into a dict, empty when the package runs from a wheel."""
    if not pyproject_path.is_file():
        return {}
    with pyproject_path.open("rb") as file_handle:
        return tomllib.load(file_handle)


def get_version(project: dict) -> str:
    """Get version from installed package metadata or fallback to pyproject."""
    try:
        return importlib.metadata.version("hypermedia")
    except importlib.metadata.PackageNotFoundError:
        return project.get("project", {}).get("version", "0.0.0")


class Settings(BaseSettings):
    """Unified settings for the hypermedia codec layer."""

    DEBUG: bool = False
    ENVIRONMENT: Literal["DEV", "PROD"] = "DEV"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # ClassVar to prevent Pydantic from trying to load from env
    BASE_DIR: ClassVar[Path] = Path(__file__).parent.parent.parent
    PROJECT: ClassVar[dict] = read_pyproject(BASE_DIR / "pyproject.toml")
    NAME: ClassVar[str] = PROJECT.get("project", {}).get("name", "hypermedia")
    DESCRIPTION: ClassVar[str] = PROJECT.get("project", {}).get("description", "Hypermedia codecs")
    VERSION: ClassVar[str] = get_version(PROJECT)

    # Codecs
    # Capped below the interpreter recursion limit
    MAX_NESTING_DEPTH: int = Field(default=32, ge=1, le=NESTING_DEPTH_CEILING)
    NAVAL_PRETTY: bool = False

    model_config = SettingsConfigDict(env_prefix="HYPERMEDIA_", env_file=".env", env_file_encoding="utf-8")


settings = Settings()  # type: ignore
