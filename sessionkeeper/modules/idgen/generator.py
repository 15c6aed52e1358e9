import secrets
import string
import time
from typing import Callable, Optional

# ASCII-ordered, so fixed-width strings sort the same as the integers they encode
BASE62_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
ID_WIDTH = 12

# Nanosecond timestamps lose their low 6 bits (64 ns buckets)
COARSEN_BITS = 6
RANDOM_BITS = 10


def encode62(value: int, width: int = 0) -> str:
    """
    Encode a non-negative integer in base 62, left-padded to width.

    Args:
        value: Integer to encode
        width: Minimum output length (0 for no padding)

    Returns:
        Base-62 string
    """
    if value < 0:
        raise ValueError("cannot encode negative value")

    digits = []
    while value:
        value, rem = divmod(value, 62)
        digits.append(BASE62_ALPHABET[rem])

    encoded = "".join(reversed(digits)) or BASE62_ALPHABET[0]
    return encoded.rjust(width, BASE62_ALPHABET[0])


def decode62(encoded: str) -> int:
    """Decode a base-62 string produced by encode62."""
    if not encoded:
        raise ValueError("cannot decode empty string")

    value = 0
    for char in encoded:
        index = BASE62_ALPHABET.find(char)
        if index < 0:
            raise ValueError(f"invalid base62 character: {char!r}")
        value = value * 62 + index
    return value


class IdentifierGenerator:
    """
    Time-ordered session identifier generator.

    Each id is the wall-clock timestamp in nanoseconds with its low bits
    discarded, followed by RANDOM_BITS of randomness, encoded as a fixed-width
    base-62 string. Ids from calls further apart than the coarsening
    granularity sort in call order. Calls landing in the same bucket are told
    apart by the random bits but may sort either way, so ids are a
    collision-resistance mechanism and not a strict sequence.

    Thread-safe: there is no shared mutable state.
    """

    def __init__(
        self,
        clock: Callable[[], int] = time.time_ns,
        randbits: Callable[[int], int] = secrets.randbits,
        coarsen_bits: int = COARSEN_BITS,
        random_bits: int = RANDOM_BITS,
        width: int = ID_WIDTH,
    ):
        """
        Initialize generator.

        Args:
            clock: Nanosecond clock
            randbits: Random source taking a bit count
            coarsen_bits: Low timestamp bits to discard
            random_bits: Random bits appended below the timestamp
            width: Padded output length
        """
        self._clock = clock
        self._randbits = randbits
        self._coarsen_bits = coarsen_bits
        self._random_bits = random_bits
        self._width = width

    def generate(self) -> str:
        """Return a new session identifier."""
        timestamp = self._clock() >> self._coarsen_bits
        value = (timestamp << self._random_bits) | self._randbits(self._random_bits)
        return encode62(value, self._width)

    def timestamp_of(self, session_id: str) -> Optional[int]:
        """
        Recover the coarsened nanosecond timestamp from an id.

        Returns None when the id was not produced by a generator with this
        layout.
        """
        try:
            value = decode62(session_id)
        except ValueError:
            return None
        return (value >> self._random_bits) << self._coarsen_bits

    def __call__(self) -> str:
        return self.generate()


default_id_generator = IdentifierGenerator()
