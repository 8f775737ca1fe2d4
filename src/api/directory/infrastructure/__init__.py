"""Infrastructure adapters for the user directory context."""
