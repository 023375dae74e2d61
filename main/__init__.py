"""Project-level definitions."""
