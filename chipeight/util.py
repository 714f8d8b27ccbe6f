"""Small bit and digit helpers used by the display and the interpreter."""


def get_hex_digits(n: int, d: int, o: int) -> int:
    """Return ``d`` hexadecimal digits of ``n`` starting ``o`` digits from the right."""
    return (n // 16**o) % 16**d


def is_bit_set(byte: int, n: int) -> bool:
    """Return True if bit ``n`` (0 is least significant) of ``byte`` is set."""
    return byte & (1 << n) != 0


def get_bit(byte: int, n: int) -> int:
    """Return bit ``n`` of ``byte`` as 0 or 1."""
    return (byte >> n) & 1