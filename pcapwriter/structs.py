"""
Module providing facilities for encoding struct-like data.
"""

import struct

INT_FORMATS = {8: "b", 16: "h", 32: "i", 64: "q"}


def _int_format(size, signed, endianness):
    fmt = INT_FORMATS.get(size)
    if fmt is None:
        raise ValueError("Unsupported integer size: {0} bits".format(size))
    fmt = fmt.lower() if signed else fmt.upper()
    assert endianness in "<>!="
    return endianness + fmt


def write_int(number, stream, size, signed=False, endianness="="):
    """
    Write (and encode) an integer number to a binary stream.

    :param number: the integer number to write
    :param stream: an object providing a ``write()`` method
    :param size: the size, in bits, of the number to be written.
        Supported sizes are: 8, 16, 32 and 64 bits.
    :param signed: Whether a signed or unsigned number is required.
        Defaults to ``False`` (unsigned int).
    :param endianness: specify the endianness to use to encode the number,
        in the same format used by Python :py:mod:`struct` module.
        Defaults to '=' (native endianness). '!' means "network" endianness
        (big endian), '<' little endian, '>' big endian.
    :returns: the number of bytes the stream reported as written
    """
    return write_bytes(stream, struct.pack(_int_format(size, signed, endianness), number))


def write_bytes(stream, data):
    """
    Write the given raw bytes to a stream.

    Raw (unbuffered) streams may accept only part of the data; the count
    they report is returned unchanged so the caller can detect a short
    write. Streams whose ``write()`` returns ``None`` are assumed to have
    taken everything.

    :param stream: the stream into which to write data
    :param data: a bytes-like object
    :returns: the number of bytes written
    """
    written = stream.write(data)
    if written is None:
        return memoryview(data).nbytes
    return written


def byte_length(data):
    """Size in bytes of any bytes-like object."""
    return memoryview(data).nbytes


def byte_view(data):
    """
    Return a flat, contiguous, unsigned-byte view of a bytes-like object.

    Contiguous buffers are viewed in place; strided ones (such as
    ``memoryview(b"abcdef")[::2]``) are copied.
    """
    view = memoryview(data)
    if view.c_contiguous:
        return view.cast("B")
    return memoryview(view.tobytes())


class StructField(object):
    """Abstract base class for struct fields"""

    __slots__ = []

    def validate(self, name, value):
        pass

    def encode(self, value, stream, endianness="="):
        raise NotImplementedError

    def __repr__(self):
        return "{0}()".format(self.__class__.__name__)


class IntField(StructField):
    """
    Field containing an integer number.

    :param size: number of bits
    :param signed: whether the number is signed or not
    """

    __slots__ = ["size", "signed"]

    def __init__(self, size, signed=False):
        self.size = size
        self.signed = signed

    @property
    def min_value(self):
        return -(1 << (self.size - 1)) if self.signed else 0

    @property
    def max_value(self):
        if self.signed:
            return (1 << (self.size - 1)) - 1
        return (1 << self.size) - 1

    def validate(self, name, value):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(
                "{0} must be an integer, got {1!r}".format(name, value)
            )
        if not self.min_value <= value <= self.max_value:
            raise ValueError(
                "{0} must be in range {1}..{2}, got {3}".format(
                    name, self.min_value, self.max_value, value
                )
            )

    def encode(self, value, stream, endianness="="):
        write_int(value, stream, self.size, signed=self.signed, endianness=endianness)

    def __repr__(self):
        return "{0}(size={1}, signed={2})".format(
            self.__class__.__name__, self.size, self.signed
        )


def struct_encode(schema, obj, stream, endianness="="):
    """
    Encode the fields of a struct-like object into a stream.

    :param schema: list of ``(name, field, default)`` tuples
    :param obj: the object holding the values; fields are read with
        ``getattr()`` so properties can provide computed values
    :param stream: output stream
    :param endianness: byte order for all the fields
    """
    for name, field, default in schema:
        field.encode(getattr(obj, name), stream, endianness=endianness)
