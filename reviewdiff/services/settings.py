"""
Application settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

from reviewdiff.core.diff.word_diff import WordDiffOptions

logger = logging.getLogger(__name__)


class OutputFormat(Enum):
    """Command output format."""
    TEXT = "text"
    JSON = "json"

    @classmethod
    def from_string(cls, value: str) -> 'OutputFormat':
        """Create from string value."""
        try:
            for fmt in cls:
                if fmt.value == value.lower():
                    return fmt
            return cls[value.upper()]
        except (KeyError, AttributeError):
            return cls.TEXT


@dataclass
class WordDiffSettings:
    """Settings for word-level diffs."""
    max_alignment_cells: Optional[int] = 250_000
    tab_size: int = 4
    pair_only_mixed: bool = True

    def to_options(self) -> WordDiffOptions:
        """Build engine options from these settings."""
        return WordDiffOptions(max_alignment_cells=self.max_alignment_cells)


@dataclass
class ConflictSettings:
    """Settings for conflict views."""
    show_base: bool = True
    normalize_line_endings: bool = True
    ours_title: str = "Ours (HEAD)"
    base_title: str = "Base (Common)"
    theirs_title: str = "Theirs (Target)"


@dataclass
class OutputSettings:
    """Settings for command output."""
    format: OutputFormat = OutputFormat.TEXT
    color: bool = True
    column_width: int = 40


@dataclass
class ApplicationSettings:
    """Main application settings container."""
    word_diff: WordDiffSettings = field(default_factory=WordDiffSettings)
    conflicts: ConflictSettings = field(default_factory=ConflictSettings)
    output: OutputSettings = field(default_factory=OutputSettings)


class SettingsManager:
    """Manager for loading/saving application settings."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = Path(settings_path) if settings_path else self._get_default_path()
        self._settings: Optional[ApplicationSettings] = None
        self._observers: list[Callable[[ApplicationSettings], None]] = []

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / 'ReviewDiff' / 'settings.json'
        else:
            config_home = os.environ.get('XDG_CONFIG_HOME',
                                         os.path.expanduser('~/.config'))
            return Path(config_home) / 'reviewdiff' / 'settings.json'

    @property
    def settings(self) -> ApplicationSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> ApplicationSettings:
        """Load settings from disk, falling back to defaults."""
        if not self.settings_path.exists():
            return ApplicationSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("settings root must be an object")
            return self._from_dict(data)
        except Exception as e:
            logger.warning(f"Could not load settings from {self.settings_path}: {e}")
            return ApplicationSettings()

    def save(self, settings: Optional[ApplicationSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(self._to_dict(settings), f, indent=2)

            self._settings = settings
            self._notify_observers()
            return True

        except OSError as e:
            logger.warning(f"Could not save settings to {self.settings_path}: {e}")
            return False

    def reset(self) -> ApplicationSettings:
        """Reset to default settings."""
        self._settings = ApplicationSettings()
        self.save()
        return self._settings

    def add_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        """Add a callback to be notified of settings changes."""
        self._observers.append(callback)

    def remove_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        """Remove a settings change observer."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify_observers(self) -> None:
        for callback in self._observers:
            callback(self._settings)

    def _to_dict(self, settings: ApplicationSettings) -> dict:
        """Convert settings to dictionary for JSON serialization."""
        def convert(obj: Any) -> Any:
            if isinstance(obj, Enum):
                return obj.name
            elif isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [convert(item) for item in obj]
            else:
                return obj

        return convert(asdict(settings))

    def _from_dict(self, data: dict) -> ApplicationSettings:
        """Convert dictionary back to settings objects.

        Sections that are not objects and values of the wrong type are
        replaced by their defaults.
        """
        def get_enum(enum_class: type, value: Any) -> Enum:
            if isinstance(value, str):
                try:
                    return enum_class[value]
                except KeyError:
                    pass
            return list(enum_class)[0]

        def section(name: str) -> dict:
            value = data.get(name)
            return value if isinstance(value, dict) else {}

        def typed(values: dict, key: str, default: Any, kinds: tuple) -> Any:
            value = values.get(key, default)
            # bool is a subclass of int
            if isinstance(value, bool) and bool not in kinds:
                return default
            return value if isinstance(value, kinds) else default

        word_data = section('word_diff')
        defaults = WordDiffSettings()
        word_diff = WordDiffSettings(
            max_alignment_cells=typed(word_data, 'max_alignment_cells',
                                      defaults.max_alignment_cells, (int, type(None))),
            tab_size=typed(word_data, 'tab_size', defaults.tab_size, (int,)),
            pair_only_mixed=typed(word_data, 'pair_only_mixed', defaults.pair_only_mixed, (bool,)),
        )

        conflict_data = section('conflicts')
        conflict_defaults = ConflictSettings()
        conflicts = ConflictSettings(
            show_base=typed(conflict_data, 'show_base', conflict_defaults.show_base, (bool,)),
            normalize_line_endings=typed(conflict_data, 'normalize_line_endings',
                                         conflict_defaults.normalize_line_endings, (bool,)),
            ours_title=typed(conflict_data, 'ours_title', conflict_defaults.ours_title, (str,)),
            base_title=typed(conflict_data, 'base_title', conflict_defaults.base_title, (str,)),
            theirs_title=typed(conflict_data, 'theirs_title', conflict_defaults.theirs_title, (str,)),
        )

        output_data = section('output')
        output_defaults = OutputSettings()
        output = OutputSettings(
            format=get_enum(OutputFormat, output_data.get('format', 'TEXT')),
            color=typed(output_data, 'color', output_defaults.color, (bool,)),
            column_width=typed(output_data, 'column_width', output_defaults.column_width, (int,)),
        )

        return ApplicationSettings(
            word_diff=word_diff,
            conflicts=conflicts,
            output=output,
        )
