"""
cvdesk_gateway.auth

Session token package.

Responsibilities:
- Issue and validate the signed session tokens carried in the session cookie.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Authorization decisions live in `cvdesk_gateway.access`; this package only
# answers "is this token genuine and whose is it".
