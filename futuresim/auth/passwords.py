"""Salted password hashing for stored accounts."""

import hashlib
import hmac
import secrets

ALGORITHM = "pbkdf2_sha256"
ITERATIONS = 200_000


def hash_password(password: str, salt: str | None = None, iterations: int = ITERATIONS) -> str:
    """Hash a password into an 'algorithm$iterations$salt$digest' string.

    Args:
        password: Plaintext password.
        salt: Hex salt; a random one is generated if omitted.
        iterations: PBKDF2 iteration count.

    Returns:
        Encoded hash suitable for Account.password_hash.
    """
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), bytes.fromhex(salt), iterations
    )
    return f"{ALGORITHM}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str | None) -> bool:
    """Check a plaintext password against an encoded hash."""
    if not encoded:
        return False

    try:
        algorithm, iterations, salt, _ = encoded.split("$")
        if algorithm != ALGORITHM:
            return False
        expected = hash_password(password, salt=salt, iterations=int(iterations))
    except ValueError:
        return False

    return hmac.compare_digest(expected, encoded)
