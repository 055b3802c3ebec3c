"""Shared web counter service backed by memory or PostgreSQL."""

__version__ = "0.1.0"
