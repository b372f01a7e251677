"""Database Infrastructure — SQLAlchemy declarative base shared by both backends.

Invariants:
    - One metadata for SQLite and PostgreSQL; dialect differences live in
      infrastructure/storage.py, never in the models
"""
