"""Riftlens: match-timeline analytics for League of Legends."""

__version__ = "0.1.0"
