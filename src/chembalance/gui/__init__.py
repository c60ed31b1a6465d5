"""GUI package for chembalance."""

from chembalance.gui.presentation import TermView, feedback_text, header_text, term_views

__all__ = ["TermView", "feedback_text", "header_text", "term_views"]
