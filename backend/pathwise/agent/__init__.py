"""Tutor agent: roadmap parsing, practice generation and the turn graph."""
