"""Command-line client for the Lunch Money personal-finance API."""

__version__ = "0.1.0"
