"""Security utilities - passwords, JWTs and token hashing."""

from src.siteline.core.security.crypto import (
    TokenType,
    create_access_token,
    create_refresh_token,
    decode_token,
    dummy_password_hash,
    generate_url_token,
    hash_password,
    hash_token,
    verify_password,
)

__all__ = [
    "TokenType",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
    "dummy_password_hash",
    "generate_url_token",
    "hash_password",
    "hash_token",
    "verify_password",
]
