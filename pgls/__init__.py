"""Locate, provision and launch the Postgres Language Server binary."""

__version__ = "0.3.0"
