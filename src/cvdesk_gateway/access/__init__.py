"""
cvdesk_gateway.access

Access-control core: who may reach which page.

Responsibilities:
- Role-permission table and capability checks.
- Route classification by path prefix.
- Session resolution into a request-scoped `Principal`.
- The authorization guard that turns (path, session evidence) into a decision.
"""

# Package marker; import from the submodules directly.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package performs I/O except the session resolver, and that only
# through the `IdentityStore` protocol.
