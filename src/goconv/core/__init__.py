"""Ambient services for goconv: console and logging, errors, settings."""
