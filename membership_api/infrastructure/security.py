import secrets

from passlib.context import CryptContext

pwd = CryptContext(
    schemes=["bcrypt_sha256"],
    deprecated="auto",
    bcrypt_sha256__truncate_error=False,
)

SESSION_TOKEN_BYTES = 32


class PasswordHasher:
    def hash(self, plain: str) -> str: return pwd.hash(plain)
    def verify(self, plain: str, hashed: str) -> bool: return pwd.verify(plain, hashed)


def generate_session_token() -> str:
    """Opaque session token: 32 random bytes, hex encoded (64 chars)."""
    return secrets.token_hex(SESSION_TOKEN_BYTES)
