import hashlib
import secrets

import bcrypt
from fastapi import HTTPException, Request

BCRYPT_MAX_BYTES = 72


def verify_secret(candidate: str, expected: str) -> bool:
    """Check *candidate* against the configured admin secret.

    The configured value may be plaintext, ``sha256:<hex digest>`` or a
    bcrypt hash. Comparisons run in constant time.
    """
    if expected.startswith("sha256:"):
        digest = hashlib.sha256(candidate.encode("utf-8")).hexdigest()
        return secrets.compare_digest(digest, expected.split(":", 1)[1])
    elif expected.startswith(("$2a$", "$2b$", "$2y$")):
        password = candidate.encode("utf-8")
        # bcrypt only accepts up to 72 bytes, so a longer secret can never match
        if len(password) > BCRYPT_MAX_BYTES:
            return False
        return bcrypt.checkpw(password, expected.encode("utf-8"))
    return secrets.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def check_secret(request: Request, secret: str | None) -> None:
    """Reject the request unless *secret* matches the app's admin secret."""
    expected = request.app.state.admin_secret
    if not expected:
        raise HTTPException(500, "Admin secret not configured")

    try:
        secret_ok = bool(secret) and verify_secret(secret, expected)
    except ValueError:
        raise HTTPException(500, "Invalid admin secret configuration")

    if not secret_ok:
        raise HTTPException(403, "Invalid admin secret")
