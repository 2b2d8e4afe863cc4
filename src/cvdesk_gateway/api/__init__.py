"""
cvdesk_gateway.api

API package for the CV desk gateway.

Responsibilities:
- FastAPI app factory, authorization middleware and router modules.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Keep this layer thin: request plumbing here, decisions in `cvdesk_gateway.access`.
