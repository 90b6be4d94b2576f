"""Core infrastructure: configuration, database, logging, auth."""
