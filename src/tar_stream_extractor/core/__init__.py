"""Core extraction engine and settings."""
