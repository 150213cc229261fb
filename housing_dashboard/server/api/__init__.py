"""HTTP API of the dashboard."""
