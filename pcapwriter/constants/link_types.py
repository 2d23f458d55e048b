# Link-layer header types, as registered at
# https://www.tcpdump.org/linktypes.html
# Only the types a tunnel or loopback capture is likely to need are listed.

# BSD loopback encapsulation: a 32-bit host-byte-order AF_ value
# followed by the L3 packet.
LINKTYPE_NULL = 0

# D/I/X and 802.3 Ethernet
LINKTYPE_ETHERNET = 1

# Point-to-point Protocol
LINKTYPE_PPP = 9

# Raw IP; the packet begins with an IPv4 or IPv6 header
LINKTYPE_RAW = 101

# OpenBSD loopback: like LINKTYPE_NULL but the AF_ value is big-endian
LINKTYPE_LOOP = 108

# Linux "cooked" capture encapsulation
LINKTYPE_LINUX_SLL = 113

# Raw IPv4 / raw IPv6 only
LINKTYPE_IPV4 = 228
LINKTYPE_IPV6 = 229

# Linux "cooked" capture encapsulation v2
LINKTYPE_LINUX_SLL2 = 276

LINKTYPE_MIN = 0
LINKTYPE_MAX = 0xFFFF
