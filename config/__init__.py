"""Configuration management for changetrail."""

from .tracking_loader import TrackingConfigLoader, load_tracking_settings
from .tracking_schema import TrackingSettings

__all__ = ["TrackingConfigLoader", "TrackingSettings", "load_tracking_settings"]
