import copy
import os
import yaml
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

# Settings used when no YAML file overrides them
DEFAULT_CONFIG = {
    "engine": {
        "seed": "seed",
        "strict": True,
        "max_join_combinations": 1000000,
    },
    "frame": {
        "implementation": "pandas",
        "implementations": {
            "pandas": {},
        }
    },
    "sources": {
        "markdown_language": "entish",
        "base_path": None,
    },
}

class Config:
    """
    Process-wide Entish settings: interpreter defaults, the table storage
    backend and where Load(...) finds rule files. Values are addressed by
    dot paths such as "engine.seed".
    """

    _instance = None

    @classmethod
    def get_instance(cls) -> 'Config':
        if cls._instance is None:
            cls._instance = Config()
        return cls._instance

    def __init__(self):
        if Config._instance is not None:
            raise RuntimeError("Config is a singleton. Use Config.get_instance() instead.")
        self._settings = copy.deepcopy(DEFAULT_CONFIG)
        self._source_file = None

    def load_from_file(self, config_file: str) -> None:
        """Merge a YAML file over the current settings."""
        if not os.path.exists(config_file):
            logger.warning(f"Config file {config_file} not found. Keeping current settings.")
            return

        with open(config_file, 'r') as f:
            overrides = yaml.safe_load(f)

        if not overrides:
            logger.warning(f"Config file {config_file} is empty. Keeping current settings.")
            return

        _merge(self._settings, overrides)
        self._source_file = config_file
        logger.info(f"Loaded configuration from {config_file}")

    def get(self, path: str, default: Any = None) -> Any:
        node = self._settings
        for key in path.split('.'):
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node

    def set(self, path: str, value: Any) -> None:
        *parents, leaf = path.split('.')
        node = self._settings
        for key in parents:
            if not isinstance(node.get(key), dict):
                node[key] = {}
            node = node[key]
        node[leaf] = value

    def reset(self) -> None:
        """Drop every override and return to the defaults."""
        self._settings = copy.deepcopy(DEFAULT_CONFIG)
        self._source_file = None

    # Engine settings

    def get_seed(self) -> str:
        return self.get('engine.seed', 'seed')

    def is_strict(self) -> bool:
        return bool(self.get('engine.strict', True))

    def get_max_join_combinations(self) -> Optional[int]:
        return self.get('engine.max_join_combinations')

    # Storage settings

    def get_frame_implementation(self) -> str:
        return self.get('frame.implementation', 'pandas')

    def get_implementation_config(self, implementation: Optional[str] = None) -> Dict[str, Any]:
        """Backend-specific options, e.g. frame.implementations.pandas."""
        implementation = implementation or self.get_frame_implementation()
        return self.get(f'frame.implementations.{implementation}', {})

    def save(self, config_file: Optional[str] = None) -> None:
        """Write the current settings as YAML, by default back to the loaded file."""
        file_path = config_file or self._source_file
        if not file_path:
            logger.warning("No config file specified for saving.")
            return

        with open(file_path, 'w') as f:
            yaml.safe_dump(self._settings, f, default_flow_style=False)
        logger.info(f"Saved configuration to {file_path}")


def _merge(target: Dict, overrides: Dict) -> None:
    for key, value in overrides.items():
        if isinstance(target.get(key), dict) and isinstance(value, dict):
            _merge(target[key], value)
        else:
            target[key] = value


config = Config.get_instance()
