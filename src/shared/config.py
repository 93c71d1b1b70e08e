import json
from pathlib import Path
from typing import Dict, Any, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.const import (
    CONFIG_FILE_NAME, DEFAULT_ITERATIONS, DEFAULT_LOG_LEVEL, DEFAULT_MAX_SOCKETS, DEFAULT_RESULTS_DIR,
    DEFAULT_TIMEOUT_MS, ENV_FILE_NAME, ENV_PREFIX, LIBRARY_LOG_LEVELS,
)


class Config(BaseSettings):
    """Global configuration settings for the RPC latency comparator."""

    endpoints: Dict[str, str] = {}
    iterations: int = Field(default=DEFAULT_ITERATIONS, gt=0)
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    max_sockets: int = Field(default=DEFAULT_MAX_SOCKETS, gt=0)
    sample_calls_file: Optional[Path] = None
    results_dir: Path = Path(DEFAULT_RESULTS_DIR)
    log_level: str = DEFAULT_LOG_LEVEL
    library_log_levels: Dict[str, str] = dict(LIBRARY_LOG_LEVELS)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=ENV_FILE_NAME,
        extra='ignore',
    )

    @classmethod
    def load_config_from_json(cls) -> Dict[str, Any]:
        """Load configuration from config.json file."""
        config_path = Path(CONFIG_FILE_NAME)
        if config_path.exists():
            with open(config_path, 'r') as f:
                config = json.load(f)
                # Convert path settings to Path if they are strings
                for key in ("results_dir", "sample_calls_file"):
                    if config.get(key):
                        config[key] = Path(config[key])
                return config
        return {}

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        """
        Customise the sources for settings.

        Order of precedence (highest to lowest):
        1. Init settings (kwargs passed to constructor, e.g. CLI flags)
        2. Environment variables
        3. .env file
        4. JSON config file
        5. Default values
        """
        def json_source():
            return cls.load_config_from_json()

        return (
            init_settings,
            env_settings,
            dotenv_settings,
            json_source,
        )
