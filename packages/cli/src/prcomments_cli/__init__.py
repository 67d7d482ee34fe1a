"""Command-line interface for prcomments."""
