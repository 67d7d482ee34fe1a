"""Fetch, normalize and export GitHub pull request review comments."""
