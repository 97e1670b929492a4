"""Infrastructure: database sessions, key-value storage adapters, logging setup."""
