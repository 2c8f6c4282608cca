"""graceful: command engine and command bar for the graceful editor."""
__version__ = "0.3.0"
