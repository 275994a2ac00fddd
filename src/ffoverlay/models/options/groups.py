"""Help-screen sections for the command line."""

from __future__ import annotations

from cyclopts import Group

INPUTS_GROUP = Group.create_ordered("Inputs")
OUTPUT_GROUP = Group.create_ordered("Output")
COMPOSITION_GROUP = Group.create_ordered("Composition")
RUNTIME_GROUP = Group.create_ordered("Runtime")

__all__ = [
    "COMPOSITION_GROUP",
    "INPUTS_GROUP",
    "OUTPUT_GROUP",
    "RUNTIME_GROUP",
]
