"""
Module for alerting the user when writing records that a pcap reader may
not expect, such as packets larger than the declared snapshot length.

Unlike a strict pcap writer, the default level is ``NONE``: oversized
records are written in full, exactly as given.
"""

import warnings
from enum import IntEnum

from pcapwriter.exceptions import PcapStrictnessError, PcapStrictnessWarning


class Strictness(IntEnum):
    NONE = 0  # Write everything as given
    WARN = 1  # Write everything, but warn of potential issues
    FIX = 2  # Warn of potential issues, fix *if possible*
    FORBID = 3  # raise exception on potential issues


strict_level = Strictness.NONE


def set_strictness(level):
    if not isinstance(level, Strictness):
        raise TypeError("not a Strictness level: {0!r}".format(level))
    global strict_level
    strict_level = level


def get_strictness():
    return strict_level


def problem(msg):
    "Warn or raise an exception with the given message."
    if strict_level == Strictness.FORBID:
        raise PcapStrictnessError(msg)
    elif strict_level in (Strictness.WARN, Strictness.FIX):
        warnings.warn(PcapStrictnessWarning(msg), stacklevel=3)


def should_fix():
    "True when questionable records should be corrected before writing."
    return strict_level == Strictness.FIX
