"""Read-only stock market dashboard: REST API and server-rendered pages."""

__version__ = "1.0.0"
