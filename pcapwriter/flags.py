"""
Module to wrap an integer in bitwise flag/field accessors.
"""

from collections import OrderedDict, namedtuple


class FlagBase(object):
    """\
    Base class for flag types to be used in a FlagWord object.
    Handles the bitwise math so subclasses don't have to worry about it.
    """

    __slots__ = [
        "owner",
        "offset",
        "size",
        "mask",
    ]

    def __init__(self, owner, offset, size):
        if size < 1:
            raise TypeError("Flag must be at least 1 bit wide")
        if offset + size > owner._nbits:
            raise TypeError("Flag must fit into owner size")
        self.owner = owner
        self.offset = offset
        self.size = size
        self.mask = ((1 << size) - 1) << offset

    def get_bits(self):
        return (self.owner._value & self.mask) >> self.offset

    def set_bits(self, val):
        if val < 0 or val >= (1 << self.size):
            raise ValueError(
                "{0} does not fit in {1} bit(s)".format(val, self.size)
            )
        self.owner._value &= ~self.mask
        self.owner._value |= val << self.offset


class FlagBool(FlagBase):
    """Object representing a single boolean flag"""

    def __init__(self, owner, offset, size):
        if size != 1:
            raise TypeError(
                "{cls} can only be 1 bit in size".format(cls=self.__class__.__name__)
            )
        super(FlagBool, self).__init__(owner, offset, size)

    def get(self):
        return bool(self.get_bits())

    def set(self, val):
        self.set_bits(int(bool(val)))


class FlagUInt(FlagBase):
    """\
    Object representing an unsigned integer of the given size stored in
    a larger bitfield
    """

    def get(self):
        return self.get_bits()

    def set(self, val):
        self.set_bits(int(val))


# A single entry of a FlagWord schema; 'nbits' defaults to 1.
FlagField = namedtuple("FlagField", ("name", "ftype", "nbits"), defaults=(1,))


class FlagWord(object):
    """\
    Class to wrap an integer in bitwise flag/field accessors.
    """

    __slots__ = [
        "_nbits",
        "_value",
        "_schema",
    ]

    def __init__(self, schema, nbits=16, initial=0):
        """
        :param schema:
            A list of FlagField objects, in order from LSB to MSB of the
            underlying int. A field named with a leading underscore only
            reserves its bits.

        :param nbits:
            The total number of bits available for flags

        :param initial:
            The initial integer value of the flags field
        """

        self._nbits = nbits
        self._value = initial
        self._schema = OrderedDict()

        tot_bits = sum(item.nbits for item in schema)
        if tot_bits > nbits:
            raise TypeError(
                "Too many fields for {nbits}-bit field "
                "(schema defines {tot} bits)".format(nbits=nbits, tot=tot_bits)
            )

        bitn = 0
        for item in schema:
            if not isinstance(item, FlagField):
                raise TypeError("Schema must be composed of FlagField objects")
            if not item.name.startswith("_"):
                self._schema[item.name] = item.ftype(self, bitn, item.nbits)
            bitn += item.nbits

    def __int__(self):
        return self._value

    def __eq__(self, other):
        if not isinstance(other, FlagWord):
            return NotImplemented
        return self._value == other._value

    def __repr__(self):
        rv = "<{0} (value={1})".format(self.__class__.__name__, self._value)
        for k, v in self._schema.items():
            rv += " {0}={1}".format(k, v.get())
        return rv + ">"

    def __getattr__(self, name):
        try:
            v = self._schema[name]
        except KeyError:
            raise AttributeError(name)
        return v.get()

    def __setattr__(self, name, val):
        try:
            return object.__setattr__(self, name, val)
        except AttributeError:
            pass
        try:
            v = self._schema[name]
        except KeyError:
            raise AttributeError(name)
        return v.set(val)
