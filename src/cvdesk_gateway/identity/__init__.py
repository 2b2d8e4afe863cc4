"""
cvdesk_gateway.identity

Identity-store collaborators for the session resolver.

Responsibilities:
- Validate session tokens and fetch the matching user profile.
- Offer SQL and HTTP profile backends behind one `ProfileSource` protocol.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Backends raise on transport/database errors; turning those into
# UNAUTHENTICATED is the resolver's job, not theirs.
