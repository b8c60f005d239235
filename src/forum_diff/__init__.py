"""Revision history and diff rendering service for forum posts."""

__version__ = "0.1.0"
