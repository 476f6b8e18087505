"""Branching text narrative engine: The Signal in the Nebula."""

__version__ = "0.1.0"
