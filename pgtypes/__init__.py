"""Rendering of Python values as PostgreSQL literals and decoding of PostgreSQL text-format values."""

__version__ = "10.10.6"