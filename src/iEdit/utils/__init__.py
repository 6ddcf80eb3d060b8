"""Utility helpers shared across iEdit."""
