"""
Validation profile loader.

Loads named validation profiles (rules, messages, actions) from YAML.
"""

import yaml
from typing import Dict, Any, Optional
from pathlib import Path

from modules.file_validation.core.exceptions import ConfigurationException
from shared.utils.config import settings
from shared.utils.logger import setup_logger

logger = setup_logger(__name__)


class ValidationConfigLoader:
    """
    Loads validation profiles from YAML files.

    Supports:
    - Global settings (delete_on_fail, default messages)
    - Named profiles with rules, messages, actions and delete_on_fail

    Example file:
        global:
          delete_on_fail: true
          messages:
            required: "The :attribute field is required"
        profiles:
          avatar:
            rules:
              avatar: "required|image|max:2048"
            actions:
              avatar:
                - action: move
                  args: ["avatars"]
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            config_path: Path to validation profiles YAML file
                        If None, uses VALIDATION_CONFIG_PATH or the default:
                        config/validation/profiles.yaml
        """
        if config_path is None:
            config_path = settings.VALIDATION_CONFIG_PATH

        if config_path is None:
            base_dir = Path(__file__).parent.parent.parent.parent
            config_path = base_dir / "config" / "validation" / "profiles.yaml"

        self.config_path = Path(config_path)
        self._config: Optional[Dict[str, Any]] = None

    def load(self) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Returns:
            Configuration dictionary

        Raises:
            yaml.YAMLError: If YAML parsing fails
        """
        if not self.config_path.exists():
            logger.warning(
                f"Validation config file not found: {self.config_path}. "
                "Using empty configuration."
            )
            self._config = self._get_default_config()
            return self._config

        try:
            with open(self.config_path, 'r') as f:
                self._config = yaml.safe_load(f) or {}

            logger.info(f"Loaded validation config from: {self.config_path}")
            return self._config

        except yaml.YAMLError as e:
            logger.error(f"Failed to parse validation config: {e}")
            raise

    def get_global_settings(self) -> Dict[str, Any]:
        """
        Get global validation settings.

        Returns:
            Global settings dictionary
        """
        if self._config is None:
            self.load()

        return self._config.get('global') or {}

    def get_default_messages(self) -> Dict[str, str]:
        """
        Get the global message table.

        Returns:
            Message templates keyed by "field.rule" or "rule"
        """
        return dict(self.get_global_settings().get('messages') or {})

    def get_profile(self, name: str) -> Dict[str, Any]:
        """
        Get a named validation profile.

        Args:
            name: Profile name

        Returns:
            Profile with rules, messages, actions and delete_on_fail filled in

        Raises:
            ConfigurationException: If the profile is not defined
        """
        if self._config is None:
            self.load()

        profiles = self._config.get('profiles') or {}

        if name not in profiles:
            raise ConfigurationException(f"Validation profile '{name}' is not defined")

        profile = profiles[name] or {}
        global_settings = self.get_global_settings()

        return {
            'rules': profile.get('rules') or {},
            'messages': profile.get('messages') or {},
            'actions': profile.get('actions') or {},
            'delete_on_fail': profile.get(
                'delete_on_fail',
                global_settings.get('delete_on_fail', settings.DELETE_ON_FAIL)
            ),
        }

    def list_profiles(self) -> list[str]:
        """List the names of all defined profiles"""
        if self._config is None:
            self.load()

        return list((self._config.get('profiles') or {}).keys())

    def _get_default_config(self) -> Dict[str, Any]:
        """
        Get default configuration when file doesn't exist.

        Returns:
            Default configuration dictionary
        """
        return {
            'global': {
                'delete_on_fail': settings.DELETE_ON_FAIL,
                'messages': {}
            },
            'profiles': {}
        }

    def reload(self) -> Dict[str, Any]:
        """
        Reload configuration from file.

        Returns:
            Updated configuration dictionary
        """
        self._config = None
        return self.load()
