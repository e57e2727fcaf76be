"""
Anonymous pseudonyms for community posts.

A pseudonym is a pure function of its seed, so the same device posting
about the same habit and start date always shows the same name.
"""

ADJECTIVES = [
    "Brave",
    "Strong",
    "Calm",
    "Wise",
    "Kind",
    "Bold",
    "Free",
    "Pure",
    "True",
    "Hope",
]

NOUNS = [
    "Phoenix",
    "Eagle",
    "Lion",
    "Star",
    "Wave",
    "Light",
    "Path",
    "Soul",
    "Heart",
    "Mind",
]


def _to_int32(value: int) -> int:
    """Wrap an integer to a signed 32-bit value."""
    value &= 0xFFFFFFFF
    if value & 0x80000000:
        return value - 0x100000000
    return value


def _utf16_units(text: str):
    """
    Yield UTF-16 code units, so astral characters count as two.

    Lone surrogates are hashed as-is.
    """
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def seed_hash(seed: str) -> int:
    """
    Signed 32-bit rolling hash of a seed string.

    h = h * 31 + unit, wrapped to 32 bits after every step.
    """
    h = 0
    for unit in _utf16_units(seed):
        h = _to_int32(_to_int32(h << 5) - h + unit)
    return h


def generate_anonymous_id(seed: str) -> str:
    """
    Derive a pseudonym like "BraveLion42" from a seed.

    Examples:
        "" -> "BravePhoenix0"
        "a" -> "PurePhoenix97"
    """
    h = seed_hash(seed)
    adjective = ADJECTIVES[abs(h) % len(ADJECTIVES)]
    noun = NOUNS[abs(h >> 8) % len(NOUNS)]
    number = abs(h) % 100
    return f"{adjective}{noun}{number}"


def anonymous_seed(device: str, addiction: str, start_date: str) -> str:
    """Seed from a device signal, the tracked habit and its start date."""
    return f"{device}-{addiction}-{start_date}"
