"""
cvdesk_gateway

Authorization and session gateway for the CV desk web application.

Responsibilities:
- Expose package version metadata.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
