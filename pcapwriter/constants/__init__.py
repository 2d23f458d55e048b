"""Generic constants"""

from enum import Enum

# File magic numbers
# ----------------------------------------

MAGIC_MICROSECOND = 0xA1B2C3D4
MAGIC_NANOSECOND = 0xA1B23C4D

VERSION_MAJOR = 2
VERSION_MINOR = 4

# Declared in the global header only, never enforced against records
DEFAULT_SNAPLEN = 128 * 1024

GLOBAL_HEADER_SIZE = 24
RECORD_HEADER_SIZE = 16

NSEC_PER_SEC = 1000 * 1000 * 1000


class ByteOrder(Enum):
    """Byte order of every multi-byte field, as a :py:mod:`struct` prefix"""

    BIG = ">"
    LITTLE = "<"


class TimestampResolution(Enum):
    """
    Unit of the sub-second timestamp field. The value is the number of
    nanoseconds in one unit.
    """

    NANOSECOND = 1
    MICROSECOND = 1000

    @property
    def magic(self):
        if self is TimestampResolution.NANOSECOND:
            return MAGIC_NANOSECOND
        return MAGIC_MICROSECOND
