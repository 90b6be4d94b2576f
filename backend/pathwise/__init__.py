"""Pathwise - AI-assisted learning roadmaps and practice."""

__version__ = "0.1.0"
