"""Multipart boundary generation and validation (RFC 2046 section 5.1.1).

    bcharsnospace = DIGIT / ALPHA / "'" / "(" / ")" / "+" / "_" / "," / "-" / "." / "/" / ":" / "=" / "?"
    bchars        = bcharsnospace / " "
    boundary      = 0*69<bchars> bcharsnospace
"""

import random
import string

from beartype import beartype

BCHARS_NOSPACE = string.digits + string.ascii_uppercase + string.ascii_lowercase + "'()+_,-./:=?"
BCHARS = BCHARS_NOSPACE + " "
BOUNDARY_LENGTH = 70

_system_random = random.SystemRandom()


@beartype
def generate(rng: random.Random | None = None) -> str:
    """Return a fresh 70-character boundary that never ends in a space.

    Uniqueness only has to hold within one body, so any ``random.Random`` will
    do; pass a seeded one for reproducible output.
    """
    rng = rng or _system_random
    head = "".join(rng.choice(BCHARS) for _ in range(BOUNDARY_LENGTH - 1))
    return head + rng.choice(BCHARS_NOSPACE)


def validate(boundary: object) -> str | None:
    """Return why ``boundary`` is not a valid boundary, or None when it is."""
    if not isinstance(boundary, str):
        return "boundary must be a string"
    if not 1 <= len(boundary) <= BOUNDARY_LENGTH:
        return f"boundary must be 1 to {BOUNDARY_LENGTH} characters long"
    if boundary.endswith(" "):
        return "boundary must not end with a space"
    if invalid := sorted(set(boundary) - set(BCHARS)):
        return f"boundary contains characters outside bchars: {''.join(invalid)!r}"
    return None


def is_valid(boundary: object) -> bool:
    return validate(boundary) is None
