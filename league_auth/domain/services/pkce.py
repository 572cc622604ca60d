from __future__ import annotations

import base64
import hashlib
import secrets


CODE_CHALLENGE_METHOD = "S256"


def generate_code_verifier() -> str:
    # 64 random bytes -> 86 url-safe chars, inside RFC 7636's 43..128 range.
    return secrets.token_urlsafe(64)


def code_challenge_s256(code_verifier: str) -> str:
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def generate_state() -> str:
    return secrets.token_urlsafe(32)
