"""Test data factories for deterministic test data generation."""

from tests.factories.graph import (
    graph_page,
    make_directory_audit,
    make_graph_user,
    make_role_assignment,
    make_role_definition,
    make_service_principal,
)

__all__ = [
    "graph_page",
    "make_directory_audit",
    "make_graph_user",
    "make_role_assignment",
    "make_role_definition",
    "make_service_principal",
]
