"""
autoparts_admin.auth.jwt

Credential format of the built-in identity directory: HS256 JWTs whose
subject is the identity uid.

Responsibilities:
- Mint a credential for a directory identity.
- Verify signature, issuer, audience and expiry, and hand back the two claims
  the directory needs (`sub`, `iat`).

Note:
- Hosted deployments verify Firebase ID tokens instead (see `backends.firebase`).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from autoparts_admin.settings import Settings

_REQUIRED_CLAIMS = ["sub", "iat", "exp", "iss", "aud"]


@dataclass(frozen=True, slots=True)
class JwtConfig:
    alg: str
    issuer: str
    audience: str
    secret: str

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
        )


@dataclass(frozen=True, slots=True)
class CredentialClaims:
    subject: str
    issued_at: int  # epoch seconds


class JwtValidationError(Exception):
    pass


def issue_token(
    *,
    cfg: JwtConfig,
    subject: str,
    ttl: timedelta = timedelta(hours=1),
    now: datetime | None = None,
) -> str:
    issued = now or datetime.now(tz=UTC)
    # No roles or permissions in the token: those are read from the profile per request.
    claims = {
        "sub": subject,
        "iat": int(issued.timestamp()),
        "exp": int((issued + ttl).timestamp()),
        "iss": cfg.issuer,
        "aud": cfg.audience,
    }
    return jwt.encode(claims, cfg.secret, algorithm=cfg.alg)


def decode_and_validate(*, cfg: JwtConfig, token: str) -> CredentialClaims:
    try:
        claims = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            audience=cfg.audience,
            issuer=cfg.issuer,
            options={"require": _REQUIRED_CLAIMS},
        )
    except jwt.PyJWTError as e:
        raise JwtValidationError(str(e)) from e

    subject = claims["sub"]
    if not isinstance(subject, str) or not subject:
        raise JwtValidationError("subject must be a non-empty string")
    return CredentialClaims(subject=subject, issued_at=int(claims["iat"]))
