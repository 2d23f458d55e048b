import struct

import pytest

from pcapwriter.strictness import Strictness, set_strictness


def _split_pcap(blob, endianness):
    """
    Split a pcap file into its global header fields and its records, as
    ``(seconds, subsecond, captured_len, packet_len, data)`` tuples.
    """
    header = struct.unpack(endianness + "IHHiIII", blob[:24])
    records = []
    offset = 24
    while offset < len(blob):
        fields = struct.unpack_from(endianness + "IIII", blob, offset)
        offset += 16
        data = blob[offset : offset + fields[2]]
        assert len(data) == fields[2], "truncated record"
        offset += fields[2]
        records.append(fields + (data,))
    return header, records


@pytest.fixture
def split_pcap():
    return _split_pcap


@pytest.fixture(autouse=True)
def default_strictness():
    set_strictness(Strictness.NONE)
    yield
    set_strictness(Strictness.NONE)
