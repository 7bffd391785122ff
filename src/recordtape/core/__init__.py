"""Ambient infrastructure: logging and configuration."""
