"""Translate ingress-nginx Ingress objects into Gateway API resources."""

__version__ = "0.1.0"
