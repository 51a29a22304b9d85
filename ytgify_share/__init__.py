"""ytgify-share: backend for saving, sharing and remixing GIFs."""

__version__ = "1.0.0"
