"""Infrastructure shared across bounded contexts: settings, logging, database."""
