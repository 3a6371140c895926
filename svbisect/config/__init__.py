"""Configuration module for svbisect."""

from svbisect.config.config import BisectConfig, create_bisect_config


__all__ = ["BisectConfig", "create_bisect_config"]
