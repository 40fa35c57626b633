"""
Account ID generation.

Business identifiers look like `PM-` followed by 10 uppercase hex digits
(5 random bytes). Generation alone does not guarantee uniqueness; use
`allocate_account_id` to retry against persisted accounts.
"""

import logging
import re
import secrets
from typing import Callable, Optional, TypeVar

from .exceptions import AccountIdExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ACCOUNT_ID_PREFIX = "PM-"
ACCOUNT_ID_BYTES = 5
ACCOUNT_ID_PATTERN = re.compile(r"^PM-[0-9A-F]{10}$")
MAX_ACCOUNT_ID_ATTEMPTS = 5


def generate_account_id() -> str:
    """Produce a candidate ID from a cryptographically strong source."""
    return ACCOUNT_ID_PREFIX + secrets.token_hex(ACCOUNT_ID_BYTES).upper()


def allocate_account_id(
    claim: Callable[[str], Optional[T]],
    generate: Callable[[], str] = generate_account_id,
    max_attempts: int = MAX_ACCOUNT_ID_ATTEMPTS,
) -> T:
    """
    Try candidates until one is successfully claimed.

    Args:
        claim: Called with each candidate. Returns the created record, or
            None when the candidate collides with an existing account.
        generate: Candidate generator
        max_attempts: Number of candidates to try before giving up

    Returns:
        Whatever `claim` returned for the first non-colliding candidate

    Raises:
        AccountIdExhaustedError: If every candidate collided
    """
    for attempt in range(1, max_attempts + 1):
        result = claim(generate())
        if result is not None:
            return result
        logger.warning(f"Account ID collision on attempt {attempt}/{max_attempts}")

    raise AccountIdExhaustedError(max_attempts)
