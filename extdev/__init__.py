"""extdev - rebuild and reinstall a local editor extension in one step."""

__version__ = "0.1.0"
