"""Async client for the voice-collection web API."""

__version__ = "0.1.0"
