"""Configuration loading for the MemMachine node.

Usage:
    from memmachine_node.config import get_settings

    settings = get_settings()
    history_count = settings.memory.history_count
"""

from functools import lru_cache

from memmachine_node.config.settings import Settings, config_files


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    The result is cached for the lifetime of the process.
    Call `get_settings.cache_clear()` to reload configuration.

    Raises:
        FileNotFoundError: If config/default.toml is missing
    """
    base_file, _ = config_files()
    if not base_file.is_file():
        raise FileNotFoundError(
            f"Default configuration file not found: {base_file}. "
            "Create config/default.toml or set MEMMACHINE_CONFIG_DIR."
        )
    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
