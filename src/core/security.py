"""Password hashing."""
from passlib.context import CryptContext

pwd_ctx = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    argon2__time_cost=3,
    argon2__memory_cost=65_536,
    argon2__parallelism=1,
)


def hash_password(password: str) -> str:
    return pwd_ctx.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Check a password against a stored hash. Malformed hashes never match."""
    try:
        return pwd_ctx.verify(password, hashed)
    except (ValueError, TypeError):
        return False
