"""
autoparts_admin.observability

Observability package.

Responsibilities:
- Structured logging configuration with credential redaction.
- Request context propagation and access logging.
"""

# Package marker.
