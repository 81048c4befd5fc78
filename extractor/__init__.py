"""
Text extraction pipeline for news relay.

This module reduces fetched article pages to clean readable text using
markup heuristics (noise stripping, content-region selection, tag and
entity cleanup) and runs the full-article extraction stage.
"""

__version__ = "0.1.0"
