"""
Core helpers package for the Harvest import adapter.

Settings, authentication headers and the exception hierarchy live here
so that clients and services share a single definition of each.
"""

__all__ = []
