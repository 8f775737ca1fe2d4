"""Domain layer for the user directory context."""
