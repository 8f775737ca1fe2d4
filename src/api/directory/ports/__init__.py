"""Ports (interfaces) for the user directory context."""
