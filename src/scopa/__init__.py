"""Scopa: an expression interpreter with switchable lexical/dynamic scoping."""

__version__ = "0.1.0"
