"""Configuration, error taxonomy and credential helpers."""
