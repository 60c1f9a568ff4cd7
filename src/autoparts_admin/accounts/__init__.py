"""
autoparts_admin.accounts

User administration domain.

Responsibilities:
- Typed profiles and fail-closed capability checks.
- The authorization-gated user deletion workflow.
- Profile management (provision, role/permission changes, activation).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing here imports FastAPI; routers translate `errors.AccountError` at the edge.
