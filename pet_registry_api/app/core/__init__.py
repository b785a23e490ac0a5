"""Configuration, logging, persistence and authentication helpers."""
