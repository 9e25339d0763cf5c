"""Configuration package exports."""

from .config_loader import load_config  # noqa: F401
from .model import ClientConfig, normalize_channel  # noqa: F401

__all__ = ["ClientConfig", "load_config", "normalize_channel"]
