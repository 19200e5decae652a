"""Read-only repositories over the dashboard tables."""
