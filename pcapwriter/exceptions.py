class PcapException(Exception):
    """Base for all the pcapwriter exceptions"""

    pass


class PcapWarning(Warning):
    """Base for all the pcapwriter warnings"""

    pass


class PcapDumpError(PcapException):
    """
    Indicate an error while writing a pcap file.

    The ``destination`` attribute identifies the sink the writer was
    bound to, so the failure can be traced back to a file.
    """

    def __init__(self, destination, message):
        super(PcapDumpError, self).__init__(
            "{0}: {1}".format(destination, message)
        )
        self.destination = destination


class PcapOpenError(PcapDumpError):
    """The destination could not be created or opened for writing"""

    pass


class PcapHeaderError(PcapDumpError):
    """The global file header could not be written"""

    pass


class PcapRecordError(PcapDumpError):
    """
    A record header or payload could not be written.

    The sink is left open, but its tail may now hold a partial record;
    readers will see the file as truncated at that point.
    """

    pass


class ShortWrite(PcapRecordError):
    """
    Exception used to indicate that the sink accepted fewer bytes than
    requested without raising an error itself.
    """

    def __init__(self, destination, written, expected):
        super(ShortWrite, self).__init__(
            destination, "short write {0} of {1}".format(written, expected)
        )
        self.written = written
        self.expected = expected


class PcapCloseError(PcapDumpError):
    """Releasing the sink failed"""

    pass


class PcapWriterClosed(PcapDumpError):
    """A capture was attempted on a writer that was already closed"""

    pass


class PcapStrictnessError(PcapException):
    """Indicate a record that is questionable for the declared header"""


class PcapStrictnessWarning(PcapWarning):
    """Indicate a record that is questionable for the declared header"""
