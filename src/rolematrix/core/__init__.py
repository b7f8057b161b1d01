"""Core infrastructure: errors, logging and the permission store."""
