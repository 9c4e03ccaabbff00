"""Helpers for manifests, component definitions, archives, versions and repository walkers."""

__version__ = "0.1.0"