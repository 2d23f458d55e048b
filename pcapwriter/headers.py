"""
Module containing the two fixed-size headers of the classic pcap format.

The file starts with a single :py:class:`GlobalHeader`; each captured
packet is then stored as a :py:class:`RecordHeader` immediately followed
by the packet bytes, with no padding.

Both headers are struct-like objects: a ``schema`` lists the fields in
on-disk order, and :py:meth:`Header.encode` packs them in the requested
byte order.
"""

import io

from pcapwriter.constants import (
    DEFAULT_SNAPLEN,
    GLOBAL_HEADER_SIZE,
    MAGIC_MICROSECOND,
    MAGIC_NANOSECOND,
    NSEC_PER_SEC,
    RECORD_HEADER_SIZE,
    VERSION_MAJOR,
    VERSION_MINOR,
    TimestampResolution,
)
from pcapwriter.constants import link_types
from pcapwriter.flags import FlagBool, FlagField, FlagUInt, FlagWord
from pcapwriter.structs import IntField, struct_encode

U16 = IntField(16)
U32 = IntField(32)
I32 = IntField(32, signed=True)


class Header(object):
    """Base class for headers"""

    schema = []
    # Fields encoded from a property rather than stored
    computed_fields = frozenset()
    size = 0
    __slots__ = ["_decoded"]

    def __init__(self, **kwargs):
        self._decoded = {}
        for key, field, default in self.schema:
            if key in self.computed_fields:
                continue
            value = kwargs.pop(key, default)
            field.validate(key, value)
            self._decoded[key] = value
        if kwargs:
            raise TypeError(
                "{cls} got unexpected field(s): {names}".format(
                    cls=self.__class__.__name__, names=", ".join(sorted(kwargs))
                )
            )

    def __getattr__(self, name):
        # Only reached for names that are neither slots nor properties
        try:
            return self._decoded[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __eq__(self, other):
        if self.__class__ != other.__class__:
            return False
        keys = [x[0] for x in self.schema]
        return [getattr(self, k) for k in keys] == [getattr(other, k) for k in keys]

    def __repr__(self):
        args = []
        for item in self.schema:
            name = item[0]
            args.append("{0}={1!r}".format(name, getattr(self, name)))
        return "<{name} {args}>".format(
            name=self.__class__.__name__, args=" ".join(args)
        )

    def encode(self, endianness):
        """Encodes the fields of this header into raw data"""
        out = io.BytesIO()
        struct_encode(self.schema, self, out, endianness=endianness)
        return out.getvalue()


class FcsFlags(FlagWord):
    """
    Upper half of the link-type word: whether each packet ends with a
    frame check sequence, and its length in 16-bit words.
    """

    __slots__ = []

    def __init__(self, val=0):
        super(FcsFlags, self).__init__(
            [
                FlagField("_reserved", FlagUInt, 11),
                FlagField("fcs_present", FlagBool),
                FlagField("fcs_len", FlagUInt, 4),
            ],
            nbits=16,
            initial=val,
        )


class GlobalHeader(Header):
    """
    The 24-byte header written once at the start of a pcap file.

    The last four bytes hold the FCS flags (upper 16 bits) and the
    link-layer type (lower 16 bits) of a single 32-bit word, so the
    link type ends up where readers look for it in either byte order.
    """

    __slots__ = ["_link_type", "fcs"]
    computed_fields = frozenset(["link_info"])
    size = GLOBAL_HEADER_SIZE
    schema = [
        ("magic", U32, MAGIC_NANOSECOND),
        ("version_major", U16, VERSION_MAJOR),
        ("version_minor", U16, VERSION_MINOR),
        ("thiszone", I32, 0),
        ("sigfigs", U32, 0),
        ("snaplen", U32, DEFAULT_SNAPLEN),
        ("link_info", U32, None),
    ]

    def __init__(self, link_type=link_types.LINKTYPE_RAW, fcs_len=None, **kwargs):
        super(GlobalHeader, self).__init__(**kwargs)
        if self.magic not in (MAGIC_NANOSECOND, MAGIC_MICROSECOND):
            raise ValueError("Unknown pcap magic: 0x{0:08X}".format(self.magic))
        U16.validate("link_type", link_type)
        self._link_type = link_type
        self.fcs = FcsFlags()
        if fcs_len is not None:
            self.fcs.fcs_len = fcs_len
            self.fcs.fcs_present = True

    @property
    def link_type(self):
        return self._link_type

    @property
    def link_info(self):
        return (int(self.fcs) << 16) | self._link_type

    @property
    def timestamp_resolution(self):
        if self.magic == MAGIC_NANOSECOND:
            return TimestampResolution.NANOSECOND
        return TimestampResolution.MICROSECOND


class RecordHeader(Header):
    """The 16-byte header preceding every captured packet."""

    __slots__ = []
    size = RECORD_HEADER_SIZE
    schema = [
        ("timestamp_seconds", U32, 0),
        ("timestamp_subsecond", U32, 0),
        ("captured_len", U32, 0),
        ("packet_len", U32, 0),
    ]

    @classmethod
    def for_packet(cls, timestamp_ns, captured_len, packet_len, resolution):
        """
        Build the header for a packet captured at ``timestamp_ns``
        (nanoseconds since the epoch).

        The sub-second field is the remainder after whole seconds,
        expressed in ``resolution`` units. Seconds wrap at 32 bits.
        """
        seconds, remainder = divmod(timestamp_ns, NSEC_PER_SEC)
        return cls(
            timestamp_seconds=seconds & U32.max_value,
            timestamp_subsecond=remainder // resolution.value,
            captured_len=captured_len,
            packet_len=packet_len,
        )
