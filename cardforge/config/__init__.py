"""Configuration module for cardforge."""
from cardforge.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
