"""
autoparts_admin.auth.models

Auth domain models.

Responsibilities:
- Define the verified caller identity injected into endpoints and workflows.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CallerIdentity:
    """
    Verified identifier of the requester. Lives for one request only.
    """

    uid: str


# --- Module Notes -----------------------------------------------------------
# Capabilities are not carried here: they are read from the caller's
# profile document by `accounts.authorization`, never from the credential.
