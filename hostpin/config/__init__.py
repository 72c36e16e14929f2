"""Configuration module for hostpin."""

from hostpin.config.settings import Settings, default_known_hosts

__all__ = ["Settings", "default_known_hosts"]
