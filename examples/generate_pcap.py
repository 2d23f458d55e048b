#!/usr/bin/env python

import argparse
import logging

from pcapwriter import ByteOrder, CaptureWriter
from pcapwriter.constants import link_types

parser = argparse.ArgumentParser()
parser.add_argument("outfile", type=argparse.FileType("wb"))
parser.add_argument("--little-endian", action="store_true")
parser.add_argument("-v", "--verbose", action="store_true")
args = parser.parse_args()

logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

# fmt: off
ip_header = bytes((
        0x45, 0x00, 0x00, 31,                   # IP start
        0x00, 0x00, 0x00, 0x00,                 # ID+flags
        0xfe, 17,                               # TTL, UDP
        0x00, 0x00,                             # checksum
        127, 0, 0, 1,                           # src IP
        127, 0, 0, 2,                           # dst IP
))
udp_header = bytes((
        0x12, 0x34, 0x56, 0x78,                 # src/dst ports
        0x00, 11,                               # length
        0x00, 0x00,                             # checksum
))
# fmt: on

byte_order = ByteOrder.LITTLE if args.little_endian else ByteOrder.BIG

# CaptureWriter() immediately writes the global header
with CaptureWriter(
    args.outfile, link_type=link_types.LINKTYPE_RAW, byte_order=byte_order
) as writer:
    # A packet may be handed over in as many pieces as is convenient
    writer.capture(ip_header, udp_header, b"DAP")
