"""Configuration, logging and database helpers."""
