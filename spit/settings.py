"""
Settings - The persisted difficulty setting.

The only persistence in the system:
- One integer difficulty in [1, 10], stored as JSON on local disk
- Absent or invalid data falls back to the default
- Read once when a game session starts

Difficulty maps linearly to the AI tick interval:
difficulty 1 is slow (2380ms), difficulty 10 is fast (400ms).
"""

from __future__ import annotations
import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_DIFFICULTY = 5
MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 10

BASE_INTERVAL_MS = 2600
INTERVAL_STEP_MS = 220


class SpitSettings(BaseModel):
    """User-tunable settings."""

    difficulty: int = Field(
        default=DEFAULT_DIFFICULTY,
        ge=MIN_DIFFICULTY,
        le=MAX_DIFFICULTY,
        description="AI speed, 1 (slow) to 10 (fast)",
    )

    @property
    def tick_interval_ms(self) -> int:
        return tick_interval_ms(self.difficulty)


def tick_interval_ms(difficulty: int) -> int:
    """Milliseconds between AI ticks for a difficulty level."""
    return BASE_INTERVAL_MS - INTERVAL_STEP_MS * difficulty


def default_settings_path() -> Path:
    env_path = os.getenv("SPIT_SETTINGS_PATH")
    if env_path:
        return Path(env_path)
    return Path.home() / ".spit" / "settings.json"


class SettingsStore:
    """
    File-based settings storage.

    Usage:
        store = SettingsStore("~/.spit/settings.json")
        settings = store.load()
        store.save(SpitSettings(difficulty=8))
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path).expanduser() if path else default_settings_path()

    def load(self) -> SpitSettings:
        """
        Load settings, degrading to defaults on any problem.

        Never raises: a missing file, bad JSON, a non-integer or an
        out-of-range difficulty all give the default.
        """
        if not self.path.exists():
            return SpitSettings()

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Unreadable settings at %s (%s), using defaults", self.path, e)
            return SpitSettings()

        if not isinstance(raw, dict):
            logger.warning("Settings at %s are not an object, using defaults", self.path)
            return SpitSettings()

        difficulty = raw.get("difficulty")
        if isinstance(difficulty, bool) or not isinstance(difficulty, int):
            if difficulty is not None:
                logger.warning("Invalid difficulty %r, using default", difficulty)
            return SpitSettings()

        try:
            return SpitSettings(difficulty=difficulty)
        except ValidationError:
            logger.warning("Difficulty %r out of range, using default", difficulty)
            return SpitSettings()

    def save(self, settings: SpitSettings) -> SpitSettings:
        """Validate and persist settings."""
        validated = SpitSettings.model_validate(settings.model_dump())
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(validated.model_dump(), indent=2),
            encoding="utf-8",
        )
        logger.info("Saved settings to %s", self.path)
        return validated

    def load_difficulty(self) -> int:
        return self.load().difficulty
