"""Builders for the objects the provider adds to the generic output."""

from .materializer import ResourceMaterializer

__all__ = ["ResourceMaterializer"]
