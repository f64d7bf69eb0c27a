"""Typed database fields, query objects, PostgreSQL statement generation and client pools."""

__version__ = "0.1.0"

__all__ = ["errors", "factory", "field", "record", "query", "pool", "engine", "manager"]