"""Configuration for the context optimizer."""
