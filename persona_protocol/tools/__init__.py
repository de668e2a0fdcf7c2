"""Command-line tools for Persona Protocol."""
