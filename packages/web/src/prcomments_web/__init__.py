"""HTTP API for fetching PR review comments."""
