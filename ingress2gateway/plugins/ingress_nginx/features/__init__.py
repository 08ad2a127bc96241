"""Annotation-driven feature passes, one concern per module."""
