"""Integration settings __init__ - exports all integration settings."""

from infrastructure.configuration.integrations.graph import GraphSettings

__all__ = [
    "GraphSettings",
]
