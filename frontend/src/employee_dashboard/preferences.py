"""User preferences persisted as JSON."""

import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class Preferences(BaseModel):
    """Dashboard preferences (stored with camelCase keys)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    theme: Literal["light", "dark"] = "light"
    page_size: int = Field(default=10, ge=1, le=500)
    default_sort: str = "firstName"
    auto_refresh: bool = False
    notifications: bool = True


def load_preferences(path: Path) -> Preferences:
    """Read preferences, falling back to defaults when missing or unreadable."""
    try:
        return Preferences.model_validate_json(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Preferences()
    except (OSError, ValidationError) as e:
        logger.warning("Could not load user preferences from %s: %s", path, e)
        return Preferences()


def save_preferences(preferences: Preferences, path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(preferences.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    except OSError as e:
        logger.warning("Could not save user preferences to %s: %s", path, e)
