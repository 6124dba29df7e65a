"""Core models, errors and logging for datamap."""
