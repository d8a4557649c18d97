"""Task Mate: personal task manager (REST API + timeline board)."""

__version__ = "0.1.0"
