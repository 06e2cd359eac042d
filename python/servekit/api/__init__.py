"""HTTP API layer: dependencies and built-in routes."""
