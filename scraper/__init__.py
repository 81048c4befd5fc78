"""
Feed collection for news relay.

Polls the configured RSS/Atom feeds and writes their entries as a flat
metadata list for news selection.
"""

__version__ = "0.1.0"
