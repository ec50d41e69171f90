from passlib.context import CryptContext

# argon2 for new hashes; bcrypt kept so hashes created by the previous
# service still verify
pwd_context = CryptContext(schemes=["argon2", "bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    """Hash a password with a fresh per-record salt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Constant-time comparison of a candidate password against a stored hash.

    A stored value that is not a recognizable hash counts as a mismatch.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def dummy_verify() -> None:
    """Spend the time of one verification without a stored hash."""
    pwd_context.dummy_verify()
