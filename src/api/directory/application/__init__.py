"""Application layer for the user directory context."""
