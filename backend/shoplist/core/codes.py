"""Code Generation — login codes and invitation codes from the OS CSPRNG.

Invariants:
    - Login codes are exactly 6 decimal digits, uniform over 000000-999999
    - Invitation codes are exactly 8 uppercase hex characters (4 random bytes)
    - A failing entropy source raises; there is no time-derived fallback
"""

import secrets

LOGIN_CODE_DIGITS = 6
INVITATION_CODE_BYTES = 4


def generate_login_code() -> str:
    return f"{secrets.randbelow(10 ** LOGIN_CODE_DIGITS):0{LOGIN_CODE_DIGITS}d}"


def generate_invitation_code() -> str:
    return secrets.token_hex(INVITATION_CODE_BYTES).upper()


def normalize_invitation_code(code: str) -> str:
    """Invitation codes are matched case-insensitively."""
    return code.strip().upper()
