"""Encryption utilities for secrets stored in the database."""

from cryptography.fernet import Fernet, InvalidToken

from namingops.core.config import settings


def get_fernet() -> Fernet:
    """Get Fernet instance for encryption/decryption."""
    key = settings.FERNET_KEY
    if not key:
        raise RuntimeError(
            "FERNET_KEY not configured. "
            'Generate with: python -c "from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())"'
        )
    return Fernet(key.encode())


def encrypt_secret(value: str) -> str:
    """Encrypt a secret (API key) for storage."""
    if not value:
        return ""
    return get_fernet().encrypt(value.encode()).decode()


def decrypt_secret(encrypted: str) -> str:
    """Decrypt a stored secret."""
    if not encrypted:
        return ""
    try:
        return get_fernet().decrypt(encrypted.encode()).decode()
    except InvalidToken:
        raise ValueError("Invalid or corrupted encrypted secret")


def mask_secret(value: str | None) -> str | None:
    """Mask a secret for display: first and last four characters only."""
    if not value:
        return None
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}...{value[-4:]}"


def is_encryption_configured() -> bool:
    return bool(settings.FERNET_KEY)
