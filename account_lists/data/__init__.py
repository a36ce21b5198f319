"""Bundled account documents."""
