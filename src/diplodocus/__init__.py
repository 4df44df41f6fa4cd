"""Diplodocus - serve a directory of markdown and HTML pages as a website."""

__version__ = "0.1.0"
