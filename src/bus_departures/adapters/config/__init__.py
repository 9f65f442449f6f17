"""Configuration adapters."""

from bus_departures.adapters.config.app_config import AppConfig

__all__ = ["AppConfig"]
