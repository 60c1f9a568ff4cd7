"""
autoparts_admin.db

Persistence package (SQLAlchemy async) backing the built-in identity directory
and document store.

Responsibilities:
- Provide ORM models, engine/session setup, and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The identity directory and the document store have separate metadata trees and
# live in separate databases.
