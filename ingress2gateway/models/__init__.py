"""Kubernetes source objects and Gateway API target objects."""
