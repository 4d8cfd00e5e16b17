"""Git command bridge for desktop repository shells."""

__version__ = "0.1.0"
