"""Turbot — a knowledge workspace for product thinking, served over MCP."""

__version__ = "0.1.0"
