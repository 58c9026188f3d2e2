# credentials.py
from passlib.context import CryptContext

# argon2 is slow and salted; the salt and parameters live inside the digest.
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        # Malformed or unrecognised digests count as a mismatch.
        return False
