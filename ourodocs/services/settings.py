"""
Application settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Callable, Optional
from enum import Enum

from ourodocs.core import navigation


class Theme(Enum):
    """UI theme options."""
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def from_string(cls, value: str) -> 'Theme':
        """Create from string value."""
        try:
            # Try to match by value
            for theme in cls:
                if theme.value == value.lower():
                    return theme
            # Try to match by name
            return cls[value.upper()]
        except (KeyError, AttributeError):
            return cls.LIGHT

    def toggled(self) -> 'Theme':
        """The opposite theme."""
        return Theme.DARK if self is Theme.LIGHT else Theme.LIGHT


@dataclass
class UISettings:
    """User interface settings."""
    theme: Theme = Theme.LIGHT
    font_family: str = "Consolas"
    font_size: int = 10
    window_width: int = 1200
    window_height: int = 800
    window_maximized: bool = False
    sidebar_width: int = 240


@dataclass
class NavigationSettings:
    """Navigation and scroll spy settings."""
    nav_offset: int = navigation.NAV_OFFSET
    scroll_spy_offset: int = navigation.SCROLL_SPY_OFFSET
    compact_breakpoint: int = navigation.COMPACT_BREAKPOINT
    scroll_duration_ms: int = 400


@dataclass
class EffectSettings:
    """Settings for copy feedback and reveal animations."""
    copy_feedback_ms: int = navigation.COPY_FEEDBACK_MS
    reveal_threshold: float = navigation.REVEAL_THRESHOLD
    reveal_bottom_margin: int = navigation.REVEAL_BOTTOM_MARGIN
    fade_duration_ms: int = 600
    reveal_offset: int = 20


@dataclass
class ApplicationSettings:
    """Main application settings container."""
    ui: UISettings = field(default_factory=UISettings)
    navigation: NavigationSettings = field(default_factory=NavigationSettings)
    effects: EffectSettings = field(default_factory=EffectSettings)


class SettingsManager:
    """Manager for loading/saving application settings."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = Path(settings_path) if settings_path else self._get_default_path()
        self._settings: Optional[ApplicationSettings] = None
        self._observers: list[Callable[[ApplicationSettings], None]] = []

    @staticmethod
    def config_dir() -> Path:
        """Per-user directory holding settings and logs."""
        if os.name == "nt":
            app_data = os.environ.get("APPDATA", os.path.expanduser("~"))
            return Path(app_data) / "OuroDocs"
        config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
        return Path(config_home) / "ourodocs"

    @classmethod
    def _get_default_path(cls) -> Path:
        """Get the default settings file path."""
        return cls.config_dir() / "settings.json"

    @property
    def settings(self) -> ApplicationSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> ApplicationSettings:
        """Load settings from disk."""
        if not self.settings_path.exists():
            return ApplicationSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("settings root is not an object")
            return self._from_dict(data)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logging.warning(f"SettingsManager - Using defaults, could not load {self.settings_path}: {e}")
            return ApplicationSettings()

    def save(self, settings: Optional[ApplicationSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)

            data = self._to_dict(settings)

            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)

            self._settings = settings
            self._notify_observers()
            return True

        except (OSError, TypeError) as e:
            logging.error(f"SettingsManager - Failed to save {self.settings_path}: {e}")
            return False

    def reset(self) -> ApplicationSettings:
        """Reset to default settings."""
        self._settings = ApplicationSettings()
        self.save()
        return self._settings

    def set_theme(self, theme: Theme) -> bool:
        """Persist the theme preference."""
        self.settings.ui.theme = theme
        return self.save()

    def add_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        """Add a callback to be notified of settings changes."""
        self._observers.append(callback)

    def remove_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        """Remove a settings change observer."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify_observers(self) -> None:
        """Notify all observers of settings change."""
        for callback in self._observers:
            try:
                callback(self._settings)
            except Exception as e:
                logging.error(f"SettingsManager - Settings observer {callback!r} failed: {e}")

    def _to_dict(self, settings: ApplicationSettings) -> dict:
        """Convert settings to dictionary for JSON serialization."""
        def convert(obj: Any) -> Any:
            if isinstance(obj, Enum):
                return obj.name
            elif isinstance(obj, list):
                return [convert(item) for item in obj]
            elif isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            else:
                return obj

        # asdict() recurses into nested dataclasses but keeps enum members
        return convert(asdict(settings))

    def _from_dict(self, data: dict) -> ApplicationSettings:
        """Convert dictionary back to settings objects."""
        ui_data = data.get('ui', {})
        ui = UISettings(
            theme=Theme.from_string(ui_data.get('theme', Theme.LIGHT.name)),
            font_family=ui_data.get('font_family', UISettings().font_family),
            font_size=ui_data.get('font_size', UISettings().font_size),
            window_width=ui_data.get('window_width', UISettings().window_width),
            window_height=ui_data.get('window_height', UISettings().window_height),
            window_maximized=ui_data.get('window_maximized', False),
            sidebar_width=ui_data.get('sidebar_width', UISettings().sidebar_width),
        )

        nav_data = data.get('navigation', {})
        nav = NavigationSettings(
            nav_offset=nav_data.get('nav_offset', navigation.NAV_OFFSET),
            scroll_spy_offset=nav_data.get('scroll_spy_offset', navigation.SCROLL_SPY_OFFSET),
            compact_breakpoint=nav_data.get('compact_breakpoint', navigation.COMPACT_BREAKPOINT),
            scroll_duration_ms=nav_data.get('scroll_duration_ms', NavigationSettings().scroll_duration_ms),
        )

        effects_data = data.get('effects', {})
        effects = EffectSettings(
            copy_feedback_ms=effects_data.get('copy_feedback_ms', navigation.COPY_FEEDBACK_MS),
            reveal_threshold=effects_data.get('reveal_threshold', navigation.REVEAL_THRESHOLD),
            reveal_bottom_margin=effects_data.get('reveal_bottom_margin', navigation.REVEAL_BOTTOM_MARGIN),
            fade_duration_ms=effects_data.get('fade_duration_ms', EffectSettings().fade_duration_ms),
            reveal_offset=effects_data.get('reveal_offset', EffectSettings().reveal_offset),
        )

        return ApplicationSettings(
            ui=ui,
            navigation=nav,
            effects=effects,
        )
