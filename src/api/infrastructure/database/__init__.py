"""Database infrastructure - shared engine and session primitives."""
