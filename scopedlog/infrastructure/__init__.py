"""Infrastructure layer: structlog transport adapter."""
