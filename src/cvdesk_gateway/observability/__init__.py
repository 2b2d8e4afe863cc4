"""
cvdesk_gateway.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation (request id, path, principal) for log enrichment.
"""

# Package marker.
