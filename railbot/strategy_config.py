"""
Strategy Configuration

Loads and provides access to strategy thresholds and weights from JSON
configuration files. This allows tuning bot behavior without code changes.

Usage:
    from railbot.strategy_config import get_config

    # Get a value (with fallback default)
    value = get_config().get('thresholds', 'single_objective_cards', default=25)

    # Get a weight
    bonus = get_config().get_weight('objective_selection', 'network_multiplier', default=2.0)

Environment:
    STRATEGY_CONFIG - Path to JSON config file (default: configs/production.json)
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Default config path (relative to this file)
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "configs" / "production.json"


class StrategyConfig:
    """
    Loads and provides access to strategy weights from JSON.

    Singleton through get_config(); caches the loaded config.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the strategy config.

        Args:
            config_path: Path to JSON config file. If not provided, uses
                        STRATEGY_CONFIG env var or default production.json.
        """
        if config_path:
            self.path = Path(config_path)
        else:
            env_path = os.environ.get('STRATEGY_CONFIG')
            if env_path:
                self.path = Path(env_path)
            else:
                self.path = DEFAULT_CONFIG_PATH

        self._config: Dict[str, Any] = {}
        self._loaded = False
        self._load()

    def _load(self):
        """Load configuration from JSON file."""
        try:
            if self.path.exists():
                with open(self.path, 'r', encoding='utf-8') as f:
                    self._config = json.load(f)
                self._loaded = True
                logger.info(f"Loaded strategy config from: {self.path}")
                logger.info(f"  Config name: {self.name}")
                logger.info(f"  Config version: {self.version}")
                self._log_key_values()
            else:
                logger.warning(f"Strategy config not found: {self.path}, using defaults")
                self._config = {}
                self._loaded = False
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in strategy config {self.path}: {e}")
            self._config = {}
            self._loaded = False
        except OSError as e:
            logger.error(f"Error loading strategy config: {e}")
            self._config = {}
            self._loaded = False

    def _log_key_values(self):
        """Log key config values for verification."""
        th = self._config.get('thresholds', {})
        logger.info(f"  [thresholds] single_objective_cards={th.get('single_objective_cards')}, "
                    f"alternative_routing_cards={th.get('alternative_routing_cards')}, "
                    f"emergency_unblock_cards={th.get('emergency_unblock_cards')}")
        logger.info(f"  [thresholds] endgame_wagons={th.get('endgame_wagons')}, "
                    f"late_game_wagons={th.get('late_game_wagons')}")

        sel = self._config.get('objective_selection', {})
        logger.info(f"  [objective_selection] second_pick_threshold={sel.get('second_pick_threshold')}, "
                    f"region_multiplier={sel.get('region_multiplier')}")

    def reload(self):
        """Reload configuration from file."""
        self._load()

    @property
    def name(self) -> str:
        return self._config.get('name', 'default')

    @property
    def version(self) -> str:
        return self._config.get('version', '0.0.0')

    @property
    def is_loaded(self) -> bool:
        """Check if config was successfully loaded."""
        return self._loaded

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            section: Config section (e.g., 'thresholds', 'network')
            key: Key within section (e.g., 'late_game_wagons')
            default: Default value if not found

        Returns:
            The config value or default
        """
        section_data = self._config.get(section, {})
        return section_data.get(key, default)

    def get_weight(self, section: str, key: str, default: float = 0.0) -> float:
        """Get a numeric weight as a float."""
        return float(self.get(section, key, default))

    def get_global(self, key: str, default: Any = None) -> Any:
        """Get a global configuration value."""
        return self.get('global', key, default)


# Global singleton instance
_config: Optional[StrategyConfig] = None


def get_config() -> StrategyConfig:
    """Get the global strategy config singleton."""
    global _config
    if _config is None:
        _config = StrategyConfig()
    return _config


def set_config_path(path: str):
    """
    Set the config path and reload.

    Used for testing or switching between configs at runtime.
    """
    global _config
    _config = StrategyConfig(path)


def reload_config():
    """Reload the current configuration from file."""
    global _config
    if _config:
        _config.reload()


def reset_config():
    """Drop the cached config so the next get_config() reloads the default."""
    global _config
    _config = None
