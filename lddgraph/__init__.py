"""Graphviz views of ELF shared-library dependency trees."""

__version__ = "0.1.0"
