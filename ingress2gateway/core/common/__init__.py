"""Common base classes and utilities for core functionality."""

from .base_feature import BaseFeaturePass, BaseFeatureRunner

__all__ = ["BaseFeaturePass", "BaseFeatureRunner"]
