"""Configuration management for the lofi automator."""

from lofi_automator.config.settings import Settings, get_settings, reset_settings
from lofi_automator.config.templates import Template, TemplateRegistry, load_registry

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "Template",
    "TemplateRegistry",
    "load_registry",
]
