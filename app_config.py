# app_config.py
# Version: 1.1.0
# Read-only configuration layer for Disaster Drive with explicit portable/user-directory resolution,
# tolerant loading (unknown keys dropped, corrupt files fall back to defaults), and validated defaults.
# The application never writes configuration back; state lives only for the process lifetime.

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from app_types import Role, UserProfile

logger = logging.getLogger(__name__)

APP_DIR_NAME = "DisasterDrive"

@dataclass
class AppConfig:
    """Main application configuration."""
    version: int = 1
    portable: bool = False
    tick_interval_ms: int = 300  # Backup clock tick period
    progress_step: int = 10  # Percentage points added per tick
    window_width: int = 1100
    window_height: int = 700
    default_username: str = "demoUser"
    default_email: str = "demo@example.com"
    default_role: str = "User"
    log_max_kb: int = 150
    log_history_count: int = 5
    log_ndjson: bool = True
    debug_logging: bool = False

    def __post_init__(self):
        if self.tick_interval_ms <= 0:
            logger.warning(f"Invalid tick_interval_ms: {self.tick_interval_ms}, using 300ms")
            self.tick_interval_ms = 300
        if self.progress_step <= 0 or self.progress_step > 100:
            logger.warning(f"Invalid progress_step: {self.progress_step}, using 10")
            self.progress_step = 10
        if self.log_max_kb <= 0:
            logger.warning(f"Invalid log_max_kb: {self.log_max_kb}, using 150")
            self.log_max_kb = 150
        if self.log_history_count < 0:
            logger.warning(f"Invalid log_history_count: {self.log_history_count}, using 5")
            self.log_history_count = 5
        try:
            Role(self.default_role)
        except ValueError:
            logger.warning(f"Invalid default_role: {self.default_role!r}, using 'User'")
            self.default_role = Role.USER.value

    def default_profile(self) -> UserProfile:
        """Build the profile a fresh session starts with."""
        return UserProfile(
            username=self.default_username,
            email=self.default_email,
            role=Role(self.default_role),
        )

class ConfigManager:
    """Resolves the config location and loads it."""

    def __init__(self, portable_mode: Optional[bool] = None, config_path: Optional[Path] = None):
        if config_path is not None:
            # Explicit path wins; portable flag only matters for the log directory
            self.portable_mode = bool(portable_mode)
            self._config_path = Path(config_path)
        else:
            if portable_mode is None:
                portable_mode = self._resolve_portable_mode()
            self.portable_mode = bool(portable_mode)
            self._config_path = self._get_config_path()

        self._config_dir = self._config_path.parent
        self._log_dir = self._get_log_dir()

    @property
    def config_path(self) -> Path:
        """Read-only access to config path."""
        return self._config_path

    @property
    def config_dir(self) -> Path:
        """Read-only access to config directory."""
        return self._config_dir

    @property
    def log_dir(self) -> Path:
        """Read-only access to log directory."""
        return self._log_dir

    def _program_dir(self) -> Path:
        return Path(__file__).parent

    def _user_config_root(self) -> Path:
        """Per-user config root: APPDATA on Windows, XDG_CONFIG_HOME or ~/.config elsewhere."""
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata)

        xdg = os.environ.get("XDG_CONFIG_HOME")
        if xdg:
            return Path(xdg)

        return Path.home() / ".config"

    def _resolve_portable_mode(self) -> bool:
        """Portable mode only when a config next to the program asks for it."""
        portable_path = self._program_dir() / "config.json"
        if not portable_path.exists():
            return False

        try:
            with open(portable_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return bool(data.get('portable', False))
        except (json.JSONDecodeError, OSError, AttributeError):
            logger.debug("Portable config exists but is invalid - using standard mode")
            return False

    def _get_config_path(self) -> Path:
        if self.portable_mode:
            return self._program_dir() / "config.json"
        return self._user_config_root() / APP_DIR_NAME / "config.json"

    def _get_log_dir(self) -> Path:
        if self.portable_mode:
            return self._program_dir() / "logs"
        return self._user_config_root() / APP_DIR_NAME / "logs"

    def load_config(self) -> AppConfig:
        """Load configuration, falling back to defaults on a missing or unreadable file."""
        if not self.config_path.exists():
            logger.info(f"No config at {self.config_path}, using defaults")
            config = AppConfig()
            config.portable = self.portable_mode
            return config

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")

            config = self._dict_to_config(data)
            logger.info(f"Using config at {self.config_path} (portable={config.portable})")
            return config

        except (json.JSONDecodeError, OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to load config: {e}")
            logger.info("Using default config")
            config = AppConfig()
            config.portable = self.portable_mode
            return config

    def _dict_to_config(self, data: Dict[str, Any]) -> AppConfig:
        """Convert dictionary to AppConfig, dropping keys this version does not know."""
        known = {f.name for f in fields(AppConfig)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")

        values = {k: v for k, v in data.items() if k in known}
        values.setdefault('portable', self.portable_mode)
        return AppConfig(**values)

    def get_log_dir(self) -> Path:
        """Get the log directory, creating it if needed."""
        self._log_dir.mkdir(parents=True, exist_ok=True)
        return self._log_dir
