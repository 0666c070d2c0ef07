"""Configuration: encoder options, settings sources, logging setup."""
