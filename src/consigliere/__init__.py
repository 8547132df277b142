"""NBA trade assistant: salary-cap trade validation behind a conversational API."""

__version__ = "0.1.0"
