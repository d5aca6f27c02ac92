"""Headlines: a background news feed pipeline for polling presentation loops."""

__version__ = "0.1.0"
