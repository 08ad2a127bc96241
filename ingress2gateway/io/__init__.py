"""Manifest reading and writing."""
