"""Command line client for the Microcks API mocking and testing server."""

__version__ = "0.5.0"
