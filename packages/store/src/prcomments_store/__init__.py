"""Credential stores holding one GitHub token per session."""
