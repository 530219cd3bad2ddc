"""Cardforge - multi-provider AI assistance for project cards."""
