"""Configuration loading, schema, and defaults."""

from repopulse.config.loader import ConfigError, load_config
from repopulse.config.schema import RepoConfig, RepoPulseConfig, TeamMember

__all__ = [
    "ConfigError",
    "RepoConfig",
    "RepoPulseConfig",
    "TeamMember",
    "load_config",
]
