# src/forum_diff/db/__init__.py
"""Database engine, sessions and schema helpers."""

from .session import Base, SessionLocal, build_engine, create_tables, drop_tables, get_db

__all__ = ["Base", "SessionLocal", "build_engine", "create_tables", "drop_tables", "get_db"]
