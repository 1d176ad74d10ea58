"""Evaluator helper modules for the Scopa runtime."""

__all__ = [
    "bind",
    "control",
    "fn",
    "let",
]
