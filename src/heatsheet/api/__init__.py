"""HTTP API for the entry assignment engine."""
