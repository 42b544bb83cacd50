"""Core infrastructure: configuration, logging, errors, security and storage."""
