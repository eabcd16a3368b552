"""
Daybreak package initializer.

This package exposes the primary function ``analyze_token`` for external
usage.  Other internal modules (e.g. API, migration planning) should be
imported explicitly from their respective files.
"""

from .analyzer import analyze_token  # noqa: F401
