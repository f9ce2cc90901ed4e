"""Core infrastructure: configuration, site configuration, environment, logging."""

from wikiroundtrip.core.config import ReplaySettings, build_settings, load_settings_file
from wikiroundtrip.core.environment import ReplayEnvironment
from wikiroundtrip.core.site_config import SiteConfig, load_site_config

__all__ = [
    "ReplayEnvironment",
    "ReplaySettings",
    "SiteConfig",
    "build_settings",
    "load_settings_file",
    "load_site_config",
]
