"""
Text sanitation and block key generation.
"""

import random
from typing import Set

from .model import BLOCK_DELIMITER

MAX_KEY_ATTEMPTS = 1000
KEY_LENGTH = 5


def sanitize_draft_text(text: str) -> str:
    """Remove block delimiters so they never leak into block text."""
    return text.replace(BLOCK_DELIMITER, '')


def _base32(value: int) -> str:
    digits = '0123456789abcdefghijklmnopqrstuv'
    out = ''
    while value:
        value, rem = divmod(value, 32)
        out = digits[rem] + out
    return out or '0'


def generate_random_key(seen: Set[str]) -> str:
    """
    Return a short random key that is not in seen, and record it there.

    Callers pass one set per document, so keys are unique within a document
    and the set is released with it.

    Raises:
        RuntimeError: If no fresh key turns up after MAX_KEY_ATTEMPTS tries
    """
    for _ in range(MAX_KEY_ATTEMPTS):
        key = _base32(random.getrandbits(KEY_LENGTH * 5))
        if key not in seen:
            seen.add(key)
            return key
    raise RuntimeError("Could not generate a unique block key")
