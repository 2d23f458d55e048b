# ----------------------------------------------------------------------
# Library to write the classic libpcap capture file format
#
# See: https://wiki.wireshark.org/Development/LibpcapFileFormat
# ----------------------------------------------------------------------

from .constants import ByteOrder, TimestampResolution  # noqa
from .writer import CaptureWriter  # noqa
