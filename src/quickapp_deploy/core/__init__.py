"""Core configuration and error types for quickapp-deploy."""
