"""
Configuration loader for gnetdump
Loads YAML configuration and provides easy access to settings
"""
import os
from typing import Any, Dict, Optional

import yaml

REQUIRED_KEYS = {
    'networks': ['default_network_name', 'skip_default'],
    'output': ['file', 'indent'],
    'api': ['compute_version', 'resource_manager_version'],
}


class ConfigValidationError(Exception):
    """Raised when the configuration file is missing required settings"""


def get_bundled_config_path() -> str:
    """Path of the default config.yaml shipped inside the package"""
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.yaml')


class Config:
    """Configuration manager for gnetdump"""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or get_bundled_config_path()
        self._config = self._load_config()
        self._validate()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file"""
        if not os.path.exists(self.config_file):
            raise FileNotFoundError(f"Configuration file {self.config_file} not found")

        with open(self.config_file, 'r') as file:
            data = yaml.safe_load(file)

        if not isinstance(data, dict):
            raise ConfigValidationError(f"Configuration file {self.config_file} must contain a mapping")
        return data

    def _validate(self) -> None:
        for section, keys in REQUIRED_KEYS.items():
            if section not in self._config:
                raise ConfigValidationError(f"Missing required key '{section}' in {self.config_file}")
            for key in keys:
                if key not in (self._config[section] or {}):
                    raise ConfigValidationError(f"Missing required key '{section}.{key}' in {self.config_file}")

        if not isinstance(self._config['networks']['skip_default'], bool):
            raise ConfigValidationError(
                f"Key 'networks.skip_default' in {self.config_file} must be true or false, "
                f"got {self._config['networks']['skip_default']!r}")

    @property
    def networks(self) -> Dict[str, Any]:
        return self._config['networks']

    @property
    def default_network_name(self) -> str:
        """Get the name of the auto-created default network"""
        return self.networks['default_network_name']

    @property
    def skip_default(self) -> bool:
        return self.networks['skip_default']

    @property
    def output(self) -> Dict[str, Any]:
        return self._config['output']

    @property
    def output_file(self) -> str:
        return self.output['file']

    @property
    def output_indent(self) -> int:
        return int(self.output['indent'])

    @property
    def api(self) -> Dict[str, str]:
        return self._config['api']

    @property
    def compute_version(self) -> str:
        return self.api['compute_version']

    @property
    def resource_manager_version(self) -> str:
        return self.api['resource_manager_version']
