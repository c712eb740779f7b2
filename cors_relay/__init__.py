"""CORS relay: forwards requests to a fixed upstream and follows its redirects."""

__version__ = "1.0.0"
