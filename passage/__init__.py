"""Paste a passage, split it into sentences and annotate their rhetorical purpose."""

__version__ = "0.1.0"
