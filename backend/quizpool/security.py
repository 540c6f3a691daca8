from __future__ import annotations
from typing import Any
import jwt
from quizpool.config import settings

# Tokens are minted by the external wallet login service with the shared
# secret; this service only verifies them.

def decode_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_alg])
