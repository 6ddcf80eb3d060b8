"""Pointer-driven interaction state machines for the editor tools."""
