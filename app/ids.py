"""
Short paste identifiers.
"""
import random
import string

ID_LENGTH = 8
ID_ALPHABET = string.ascii_lowercase + string.digits

# Not a secrets source: ids only need to avoid collisions, not be unguessable.
_random = random.Random()


def generate_id() -> str:
    """Return an 8-character lowercase alphanumeric identifier (36**8 space)."""
    return "".join(_random.choices(ID_ALPHABET, k=ID_LENGTH))
