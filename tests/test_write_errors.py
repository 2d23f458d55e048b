"""
Tests for errors while writing
"""

import errno
import io
import logging

import pytest

from pcapwriter import CaptureWriter
from pcapwriter.clock import FixedClock
from pcapwriter.exceptions import (
    PcapCloseError,
    PcapDumpError,
    PcapHeaderError,
    PcapOpenError,
    PcapRecordError,
    PcapWriterClosed,
    ShortWrite,
)

T0 = 1700000000000000000


class TruncatingSink(io.BytesIO):
    """Accepts at most ``limit`` bytes in total, then reports short writes."""

    def __init__(self, limit):
        super(TruncatingSink, self).__init__()
        self.limit = limit

    def write(self, data):
        allowed = max(0, self.limit - self.tell())
        return super(TruncatingSink, self).write(bytes(data)[:allowed])


class FailingSink(io.BytesIO):
    """Raises ENOSPC on the write calls whose index is in ``fail_on``."""

    def __init__(self, fail_on=(), fail_close=False):
        super(FailingSink, self).__init__()
        self.fail_on = set(fail_on)
        self.fail_close = fail_close
        self.calls = 0
        self.close_calls = 0

    def write(self, data):
        call = self.calls
        self.calls += 1
        if call in self.fail_on:
            raise OSError(errno.ENOSPC, "No space left on device")
        return super(FailingSink, self).write(data)

    def close(self):
        self.close_calls += 1
        if self.fail_close:
            # Once only, so garbage collection can still close it
            self.fail_close = False
            raise OSError(errno.EIO, "Input/output error")
        super(FailingSink, self).close()


def test_open_failure(tmp_path):
    path = tmp_path / "no-such-dir" / "out.pcap"
    with pytest.raises(PcapOpenError) as excinfo:
        CaptureWriter(path)

    err = excinfo.value
    assert err.destination == str(path)
    assert str(path) in str(err)
    assert isinstance(err.__cause__, FileNotFoundError)


def test_header_short_write_closes_sink():
    sink = TruncatingSink(limit=10)
    with pytest.raises(PcapHeaderError, match="short write 10 of 24") as excinfo:
        CaptureWriter(sink)

    assert isinstance(excinfo.value.__cause__, ShortWrite)
    assert excinfo.value.destination == "<TruncatingSink>"
    assert sink.closed


def test_header_oserror_closes_sink():
    sink = FailingSink(fail_on=[0])
    with pytest.raises(PcapHeaderError, match="writing header") as excinfo:
        CaptureWriter(sink)

    assert excinfo.value.__cause__.errno == errno.ENOSPC
    assert sink.close_calls == 1


def test_header_error_wins_over_close_error(caplog):
    caplog.set_level(logging.DEBUG, logger="pcapwriter")
    sink = FailingSink(fail_on=[0], fail_close=True)

    with pytest.raises(PcapHeaderError) as excinfo:
        CaptureWriter(sink)

    assert excinfo.value.__cause__.errno == errno.ENOSPC
    assert sink.close_calls == 1
    assert "ignoring close error" in caplog.text


def test_record_short_write():
    # Room for the global header, the record header and 3 payload bytes
    sink = TruncatingSink(limit=24 + 16 + 3)
    writer = CaptureWriter(sink, clock=FixedClock(T0))

    with pytest.raises(ShortWrite) as excinfo:
        writer.capture(b"abcdef")

    err = excinfo.value
    assert isinstance(err, PcapRecordError)
    assert (err.written, err.expected) == (3, 6)
    assert "short write 3 of 6" in str(err)

    # Partial record left in place, sink still open
    assert len(sink.getvalue()) == 24 + 16 + 3
    assert not writer.closed
    assert not sink.closed


def test_record_header_short_write():
    sink = TruncatingSink(limit=24 + 4)
    writer = CaptureWriter(sink, clock=FixedClock(T0))

    with pytest.raises(ShortWrite, match="short write 4 of 16"):
        writer.capture(b"abcdef")


def test_record_oserror():
    # Write calls: 0 = global header, 1 = record header, 2 = first buffer
    sink = FailingSink(fail_on=[2])
    writer = CaptureWriter(sink, clock=FixedClock(T0))

    with pytest.raises(PcapRecordError, match="writing record") as excinfo:
        writer.capture(b"lost", b"too")
    assert excinfo.value.__cause__.errno == errno.ENOSPC
    assert not isinstance(excinfo.value, ShortWrite)

    # The caller may carry on; nothing tries to repair the partial record
    writer.capture(b"next")
    blob = sink.getvalue()
    assert blob[-20:-4] == (
        b"\x65\x53\xf1\x00" b"\x00\x00\x00\x00" b"\x00\x00\x00\x04" b"\x00\x00\x00\x04"
    )
    assert blob[-4:] == b"next"
    assert len(blob) == 24 + 16 + 16 + 4


def test_record_error_then_clean_record(split_pcap):
    # A failure on the record header leaves nothing behind
    sink = FailingSink(fail_on=[1])
    writer = CaptureWriter(sink, clock=FixedClock(T0))

    with pytest.raises(PcapRecordError):
        writer.capture(b"dropped")
    writer.capture(b"kept")

    header, records = split_pcap(sink.getvalue(), ">")
    assert [r[4] for r in records] == [b"kept"]


def test_lock_released_after_error():
    sink = FailingSink(fail_on=[1])
    writer = CaptureWriter(sink, clock=FixedClock(T0))
    with pytest.raises(PcapRecordError):
        writer.capture(b"x")
    assert not writer._lock.locked()


def test_close_error():
    sink = FailingSink(fail_close=True)
    writer = CaptureWriter(sink)

    with pytest.raises(PcapCloseError, match="closing") as excinfo:
        writer.close()
    assert excinfo.value.__cause__.errno == errno.EIO
    assert writer.closed

    # Not released a second time
    writer.close()
    assert sink.close_calls == 1


def test_capture_after_close_does_not_write():
    sink = FailingSink()
    writer = CaptureWriter(sink)
    writer.close()
    calls = sink.calls

    with pytest.raises(PcapWriterClosed):
        writer.capture(b"late")
    assert sink.calls == calls


def test_all_errors_are_dump_errors():
    for cls in (
        PcapOpenError,
        PcapHeaderError,
        PcapRecordError,
        ShortWrite,
        PcapCloseError,
        PcapWriterClosed,
    ):
        assert issubclass(cls, PcapDumpError)


def test_header_unexpected_error_closes_sink():
    class BrokenSink(io.BytesIO):
        def write(self, data):
            raise ValueError("boom")

    sink = BrokenSink()
    with pytest.raises(PcapHeaderError, match="writing header: boom") as excinfo:
        CaptureWriter(sink)

    assert isinstance(excinfo.value.__cause__, ValueError)
    assert sink.closed
