"""
autoparts_admin.auth

Authentication package.

Responsibilities:
- JWT helpers for the built-in identity directory.
- Bearer extraction and per-request credential verification.
- FastAPI auth dependencies (caller identity + capability checks).
"""

# Package marker.
