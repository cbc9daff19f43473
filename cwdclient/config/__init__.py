"""Configuration module for cwdclient."""

from cwdclient.config.loader import clear_config_cache, get_config, get_config_path, load_config, save_config
from cwdclient.config.schema import Config

__all__ = ["Config", "load_config", "save_config", "get_config_path", "get_config", "clear_config_cache"]
