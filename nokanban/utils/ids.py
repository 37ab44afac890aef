from ulid import ULID


def generate_id() -> str:
    """Generate a new ULID string (26 chars, lexicographically time-ordered)."""
    return str(ULID())
