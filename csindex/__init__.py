"""csindex - build and update driver for a trigram search index."""

__version__ = "1.0.0"
