"""Module: security."""

import hashlib
import hmac
import os

# Shared answer hashing format/version marker.
ANSWER_SCHEME = "pbkdf2_sha256"
ANSWER_ITERATIONS = 390000


def normalize_answer(answer: str) -> str:
    return answer.strip().lower()


def hash_answer(answer: str) -> str:
    """
    Create a PBKDF2-SHA256 hash string for a validation-question answer.

    The answer is trimmed and lowercased first so verification is
    case-insensitive.

    Stored format:
      pbkdf2_sha256$<iterations>$<salt_hex>$<hash_hex>
    """
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        normalize_answer(answer).encode("utf-8"),
        salt,
        ANSWER_ITERATIONS,
    )
    return f"{ANSWER_SCHEME}${ANSWER_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_answer(answer: str, stored: str) -> bool:
    """
    Verify a candidate answer against a stored hash in constant time.

    Malformed stored values never match.
    """
    if not stored or not stored.startswith(f"{ANSWER_SCHEME}$"):
        return False

    try:
        _, iterations_raw, salt_hex, hash_hex = stored.split("$", 3)
        iterations = int(iterations_raw)
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(hash_hex)
    except ValueError:
        return False

    computed = hashlib.pbkdf2_hmac(
        "sha256",
        normalize_answer(answer).encode("utf-8"),
        salt,
        iterations,
    )
    return hmac.compare_digest(computed, expected)
