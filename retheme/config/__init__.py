"""Configuration: engine defaults, project overrides and user settings."""

from retheme.config.engine import EngineConfig, load_project_config

__all__ = ["EngineConfig", "load_project_config"]
