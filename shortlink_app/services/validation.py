import re


SHORT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{8}$")


def is_valid_short_id(short_id: str) -> bool:
    """True if `short_id` has the shape of a generated identifier"""
    return bool(SHORT_ID_PATTERN.fullmatch(short_id))
