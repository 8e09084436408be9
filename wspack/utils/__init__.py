"""Utility helpers shared across wspack modules."""
