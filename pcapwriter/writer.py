import logging
import os
import threading

from pcapwriter import strictness
from pcapwriter.clock import system_clock
from pcapwriter.constants import DEFAULT_SNAPLEN, ByteOrder, TimestampResolution
from pcapwriter.constants.link_types import LINKTYPE_RAW
from pcapwriter.exceptions import (
    PcapCloseError,
    PcapHeaderError,
    PcapOpenError,
    PcapRecordError,
    PcapWriterClosed,
    ShortWrite,
)
from pcapwriter.headers import GlobalHeader, RecordHeader
from pcapwriter.structs import byte_length, byte_view, write_bytes

logger = logging.getLogger(__name__)


def _open_sink(destination):
    """
    Return ``(stream, name)`` for a path or an already open binary stream.
    """
    if hasattr(destination, "write"):
        name = getattr(destination, "name", None)
        if not isinstance(name, (str, bytes, os.PathLike)):
            name = "<{0}>".format(destination.__class__.__name__)
        return destination, name

    path = os.fspath(destination)
    try:
        stream = open(path, "wb")
    except OSError as err:
        raise PcapOpenError(path, err.strerror or str(err)) from err
    return stream, path


class CaptureWriter(object):
    """
    Classic pcap file writer.

    The global header is written as soon as the writer is created; every
    call to :py:meth:`capture` then appends one record. Records from
    concurrent threads never interleave: each one is written while
    holding the writer's lock.

    Example usage:

        .. code-block:: python

            from pcapwriter import CaptureWriter

            with CaptureWriter('/tmp/tunnel.pcap') as writer:
                writer.capture(ip_header, payload)

    :param destination:
        a path to create (or truncate), or a binary file-like object
        providing a ``write()`` method. Either way the writer owns it and
        closes it in :py:meth:`close`.

    :param link_type:
        link-layer type code stored in the header, one of
        :py:mod:`pcapwriter.constants.link_types`.

    :param byte_order:
        a :py:class:`~pcapwriter.constants.ByteOrder`; applies to every
        multi-byte field in the file.

    :param snaplen:
        snapshot length declared in the header. Records longer than this
        are still written in full unless the strictness level says
        otherwise (see :py:mod:`pcapwriter.strictness`).

    :param resolution:
        a :py:class:`~pcapwriter.constants.TimestampResolution`, selecting
        both the magic number and the unit of the sub-second field.

    :param fcs_len:
        if given, marks every packet as ending with a frame check sequence
        of this many 16-bit words.

    :param clock:
        callable returning integer nanoseconds since the epoch; defaults
        to :py:func:`time.time_ns`.

    :param autoflush:
        flush the sink after the header and after every record, so that
        each record reaches the operating system before the lock is
        released.

    :raises PcapOpenError: if the destination cannot be opened
    :raises PcapHeaderError: if the global header cannot be written; the
        sink has been closed by then
    """

    __slots__ = [
        "stream",
        "destination",
        "header",
        "byte_order",
        "clock",
        "autoflush",
        "_lock",
        "_closed",
    ]

    def __init__(
        self,
        destination,
        link_type=LINKTYPE_RAW,
        byte_order=ByteOrder.BIG,
        snaplen=DEFAULT_SNAPLEN,
        resolution=TimestampResolution.NANOSECOND,
        fcs_len=None,
        clock=None,
        autoflush=True,
    ):
        if not isinstance(byte_order, ByteOrder):
            raise TypeError("byte_order must be a ByteOrder, got {0!r}".format(byte_order))
        if not isinstance(resolution, TimestampResolution):
            raise TypeError(
                "resolution must be a TimestampResolution, got {0!r}".format(resolution)
            )

        # Validate everything before touching the destination
        self.header = GlobalHeader(
            magic=resolution.magic,
            snaplen=snaplen,
            link_type=link_type,
            fcs_len=fcs_len,
        )
        encoded = self.header.encode(byte_order.value)

        self.byte_order = byte_order
        self.clock = system_clock if clock is None else clock
        self.autoflush = autoflush
        self._lock = threading.Lock()
        self._closed = False

        self.stream, self.destination = _open_sink(destination)
        logger.debug("{0}: opened for capture".format(self.destination))

        try:
            self._write_chunk(encoded)
            if self.autoflush:
                self.stream.flush()
        except ShortWrite as err:
            self._discard()
            raise PcapHeaderError(
                self.destination,
                "writing header: short write {0} of {1}".format(err.written, err.expected),
            ) from err
        except Exception as err:
            # OSError, or anything else a file-like sink may raise
            self._discard()
            raise PcapHeaderError(
                self.destination, "writing header: {0}".format(err)
            ) from err

        logger.debug(
            "{0}: wrote header (link type {1}, snaplen {2}, {3} endian)".format(
                self.destination,
                self.header.link_type,
                self.header.snaplen,
                self.byte_order.name.lower(),
            )
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    @property
    def closed(self):
        return self._closed

    @property
    def link_type(self):
        return self.header.link_type

    @property
    def snaplen(self):
        return self.header.snaplen

    @property
    def resolution(self):
        return self.header.timestamp_resolution

    def capture(self, *buffers):
        """
        Append one record holding the concatenation of ``buffers``.

        The buffers are bytes-like objects forming a single packet, in
        order; passing none at all writes an empty record. The clock is
        read once, and both length fields are set to the total size.

        :raises ShortWrite: if the sink accepted fewer bytes than given
        :raises PcapRecordError: if the sink raised an :py:exc:`OSError`.
            In both cases the file may end with a partial record; the
            writer does not retry or undo anything.
        :raises PcapWriterClosed: if :py:meth:`close` was already called
        """
        if self._closed:
            raise PcapWriterClosed(self.destination, "capture on closed writer")

        # Nothing reaches the sink until every buffer is a usable byte view
        views = [byte_view(buf) for buf in buffers]
        packet_len = sum(view.nbytes for view in views)
        timestamp = self.clock()

        captured_len = packet_len
        if packet_len > self.header.snaplen:
            strictness.problem(
                "record of {0} bytes exceeds snapshot length {1}".format(
                    packet_len, self.header.snaplen
                )
            )
            if strictness.should_fix():
                captured_len = self.header.snaplen

        record = RecordHeader.for_packet(
            timestamp, captured_len, packet_len, self.header.timestamp_resolution
        ).encode(self.byte_order.value)

        with self._lock:
            try:
                self._write_chunk(record)
                remaining = captured_len
                for view in views:
                    if remaining <= 0:
                        break
                    chunk = view[:remaining]
                    if chunk.nbytes:
                        self._write_chunk(chunk)
                    remaining -= chunk.nbytes
                if self.autoflush:
                    self.stream.flush()
            except OSError as err:
                raise PcapRecordError(
                    self.destination, "writing record: {0}".format(err)
                ) from err

    def close(self):
        """
        Release the sink. Calling this more than once has no effect.

        :raises PcapCloseError: if closing (and so flushing) the sink
            failed; the writer counts as closed anyway.
        """
        if self._closed:
            return
        self._closed = True
        try:
            self.stream.close()
        except OSError as err:
            raise PcapCloseError(self.destination, "closing: {0}".format(err)) from err
        logger.debug("{0}: closed".format(self.destination))

    def _write_chunk(self, data):
        expected = byte_length(data)
        written = write_bytes(self.stream, data)
        if written != expected:
            raise ShortWrite(self.destination, written, expected)

    def _discard(self):
        """Close the sink after a failed header write, keeping the first error."""
        self._closed = True
        try:
            self.stream.close()
        except OSError as err:
            logger.debug(
                "{0}: ignoring close error after failed header write: {1}".format(
                    self.destination, err
                )
            )
