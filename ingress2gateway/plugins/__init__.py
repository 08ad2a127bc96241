"""Conversion providers."""
