"""HTTP service skeleton with health, limit and user endpoints, request ids and structured JSON logging."""

__version__ = "1.0.0"