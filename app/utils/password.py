"""비밀번호 해싱 및 검증 유틸리티 모듈.

Password hashing and verification using bcrypt.
Only the bcrypt hash is stored (users.password_hash); it never leaves the
service layer.
"""

import bcrypt

# bcrypt는 72바이트 이후를 무시 — bcrypt only considers the first 72 bytes
_BCRYPT_MAX_BYTES: int = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """평문 비밀번호를 bcrypt 해시로 변환합니다.

    Hash a plain text password with a random salt.

    Example:
        hashed = hash_password("owner123")
        # "$2b$12$LJ3m4ys3..."
    """
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """평문 비밀번호와 저장된 해시를 비교합니다.

    Check a login or current-password attempt against the stored hash.
    A stored value that is not a bcrypt hash never matches.

    Args:
        plain_password: 검증할 평문 비밀번호 (Plain text password to verify)
        hashed_password: 저장된 bcrypt 해시 (Stored bcrypt hash)

    Returns:
        bool: 일치하면 True (True if password matches hash)
    """
    try:
        return bcrypt.checkpw(_encode(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        # 손상된 해시 — Malformed hash ("Invalid salt")
        return False
