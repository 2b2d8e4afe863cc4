"""
cvdesk_gateway.services

Service layer.

Responsibilities:
- Sign-in orchestration (profile provisioning + session token issuing).
"""

# Package marker.
