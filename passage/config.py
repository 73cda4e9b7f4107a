"""Configuration loading and logging setup."""

import logging
import os
from typing import Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "logging": {
        "level": "WARNING",
        "file": None,
    },
    "purposes": None,  # None means the built-in taxonomy
}


class ConfigError(ValueError):
    """Configuration file could not be read or is malformed."""
    pass


def config_paths(config_path: Optional[str] = None) -> list[str]:
    """Get candidate config files in lookup order."""
    return [
        path for path in (
            config_path,
            os.environ.get("PASSAGE_CONFIG"),
            "config.yaml",
            os.path.expanduser("~/.config/passage/config.yaml"),
        )
        if path
    ]


def load_config(config_path: Optional[str] = None) -> dict:
    """
    Load configuration from the first config file found.

    Args:
        config_path: Explicit path, tried first. It must exist if given.

    Returns:
        Config dict with defaults filled in for missing sections
    """
    load_dotenv()

    if config_path and not os.path.exists(config_path):
        raise ConfigError(f"Config file not found: {config_path}")

    loaded: dict = {}
    for path in config_paths(config_path):
        if os.path.exists(path):
            try:
                with open(path, "r", encoding="utf-8") as f:
                    loaded = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Could not read {path}: {e}") from e
            if not isinstance(loaded, dict):
                raise ConfigError(f"{path}: top level must be a mapping")
            logger.info("Loaded config from %s", path)
            break

    for section in ("logging", "purposes"):
        if not isinstance(loaded.get(section), (dict, type(None))):
            raise ConfigError(f"'{section}' section must be a mapping")

    config = {key: value for key, value in DEFAULT_CONFIG.items()}
    config["logging"] = {**DEFAULT_CONFIG["logging"], **(loaded.get("logging") or {})}
    if "purposes" in loaded:
        config["purposes"] = loaded["purposes"]
    return config


def configure_logging(config: dict) -> None:
    """Set up root logging from the `logging` config section.

    PASSAGE_LOG_LEVEL in the environment overrides the configured level.
    """
    log_config = config.get("logging", {})
    level_name = os.environ.get("PASSAGE_LOG_LEVEL") or log_config.get("level") or "WARNING"
    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level: {level_name}")

    logging.basicConfig(
        level=level,
        filename=log_config.get("file"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
