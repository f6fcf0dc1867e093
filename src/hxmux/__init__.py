"""Helix pane helper for WezTerm and tmux."""

__version__ = "0.1.0"
