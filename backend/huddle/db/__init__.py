"""Persistence base — the declarative Base every ORM model inherits.

Engines and sessions live in infrastructure/database.py.
"""
