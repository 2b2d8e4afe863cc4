"""
cvdesk_gateway.db

Persistence package (SQLAlchemy async) for user profiles.

Responsibilities:
- Provide the ORM model, engine/session setup, and the user repository.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Only the SQL profile source and sign-in depend on this package; the access core
# reaches it through `identity.IdentityStore`.
