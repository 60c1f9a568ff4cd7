"""
autoparts_admin.backends

Client boundary for the two external systems: the authentication service and
the document store.

Responsibilities:
- Define the collaborator interfaces the domain depends on.
- Provide built-in (SQL) and hosted (Firebase) implementations.
- Build the per-process backend bundle.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Domain code depends on `backends.base` only; concrete clients are chosen in
# `backends.registry`.
