"""Wikisource archive uploader."""

__version__ = "0.1.0"
