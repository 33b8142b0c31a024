import secrets
import string


REFERENCE_CODE_ALPHABET = string.ascii_uppercase + string.digits
REFERENCE_CODE_LENGTH = 8


def generate_reference_code() -> str:
    """Customer-facing booking code, e.g. `K7Q2M9XA`"""
    return ''.join(secrets.choice(REFERENCE_CODE_ALPHABET) for _ in range(REFERENCE_CODE_LENGTH))


def is_valid_reference_code(value: str) -> bool:
    return len(value) == REFERENCE_CODE_LENGTH and all(
        ch in REFERENCE_CODE_ALPHABET for ch in value
    )
