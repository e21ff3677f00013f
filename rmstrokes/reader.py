"""
Byte and tag reading for reMarkable v6 .rm files.

The v6 format is a "tagged block" protocol: every value is preceded by a
varuint tag whose upper bits carry a field index and whose low nibble
carries the wire type of the value that follows.

- Header: 43 bytes "reMarkable .lines file, version=6" padded with spaces
- Tags: varuint where index = tag >> 4, type = tag & 0xF
- IDs: u8 author + varuint sequence
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from io import BytesIO
from typing import Optional


# =============================================================================
# Constants
# =============================================================================

HEADER_V6 = b"reMarkable .lines file, version=6".ljust(43, b" ")


class TagType(IntEnum):
    """Tag types indicate what kind of data follows."""
    Byte1 = 0x1     # 1-byte value (bool, u8)
    Byte4 = 0x4     # 4-byte value (float32, u32)
    Byte8 = 0x8     # 8-byte value (float64)
    Length4 = 0xC   # Length-prefixed subblock
    ID = 0xF        # CRDT ID (u8 + varuint)


def _type_name(tag_type: int) -> str:
    try:
        return TagType(tag_type).name
    except ValueError:
        return f"0x{tag_type:X}"


# =============================================================================
# Errors
# =============================================================================

class RmParseError(ValueError):
    """Base class for errors in .rm data."""


class HeaderMismatchError(RmParseError):
    """The data does not start with the v6 header."""


class OutOfBoundsError(RmParseError, EOFError):
    """A read ran past the end of the buffer."""


class TagMismatchError(RmParseError):
    """The next tag is not the expected (index, type)."""


class MalformedSubblockError(RmParseError):
    """A subblock runs past its block or holds undecodable values."""


# =============================================================================
# CRDT identifiers
# =============================================================================

@dataclass(frozen=True, order=True)
class CrdtId:
    """CRDT identifier (author, sequence)."""
    part1: int
    part2: int

    def __str__(self) -> str:
        return f"{self.part1}:{self.part2}"

    def __repr__(self) -> str:
        return f"CrdtId({self.part1}, {self.part2})"


END_ID = CrdtId(0, 0)
ROOT_ID = CrdtId(0, 1)


# =============================================================================
# Binary Stream Reader
# =============================================================================

class BinaryReader:
    """Low-level binary reading utilities over an in-memory buffer."""

    def __init__(self, data: bytes):
        self.size = len(data)
        self.data = BytesIO(data)

    def tell(self) -> int:
        return self.data.tell()

    def seek(self, pos: int) -> None:
        self.data.seek(pos)

    def remaining(self) -> int:
        return self.size - self.data.tell()

    def read_bytes(self, n: int) -> bytes:
        """Read exactly n bytes, raise OutOfBoundsError if not enough."""
        pos = self.data.tell()
        result = self.data.read(n)
        if len(result) != n:
            self.data.seek(pos)
            raise OutOfBoundsError(
                f"Expected {n} bytes at position {pos}, got {len(result)}"
            )
        return result

    def read_bool(self) -> bool:
        return self.read_uint8() != 0

    def read_uint8(self) -> int:
        return self.read_bytes(1)[0]

    def read_uint16(self) -> int:
        return struct.unpack("<H", self.read_bytes(2))[0]

    def read_uint32(self) -> int:
        return struct.unpack("<I", self.read_bytes(4))[0]

    def read_float32(self) -> float:
        return struct.unpack("<f", self.read_bytes(4))[0]

    def read_float64(self) -> float:
        return struct.unpack("<d", self.read_bytes(8))[0]

    def read_varuint(self) -> int:
        """Read a variable-length unsigned integer."""
        result = 0
        shift = 0
        while True:
            byte = self.read_uint8()
            result |= (byte & 0x7F) << shift
            if not (byte & 0x80):
                break
            shift += 7
        return result

    def read_crdt_id(self) -> CrdtId:
        """Read a CRDT ID (u8 + varuint)."""
        part1 = self.read_uint8()
        part2 = self.read_varuint()
        return CrdtId(part1, part2)


# =============================================================================
# Tagged Block Reader
# =============================================================================

class TaggedBlockReader:
    """Reader for the v6 tagged block format."""

    def __init__(self, data: bytes):
        self.stream = BinaryReader(data)
        self.block_end: Optional[int] = None

    def read_header(self) -> None:
        """Read and validate the file header."""
        try:
            header = self.stream.read_bytes(len(HEADER_V6))
        except OutOfBoundsError:
            raise HeaderMismatchError(
                f"File too short for v6 header ({self.stream.size} bytes)"
            ) from None
        if header != HEADER_V6:
            raise HeaderMismatchError(f"Not a v6 .rm file: {header!r}")

    def bytes_remaining(self) -> float:
        """Bytes remaining in current block."""
        if self.block_end is None:
            return float("inf")
        return self.block_end - self.stream.tell()

    # -------------------------------------------------------------------------
    # Tag Reading
    # -------------------------------------------------------------------------

    def read_tag(self) -> tuple[int, int]:
        """Read a tag and return (index, type)."""
        tag = self.stream.read_varuint()
        return tag >> 4, tag & 0xF

    def expect_tag(self, expected_index: int, expected_type: TagType) -> None:
        """Read a tag and verify it matches expectations."""
        pos = self.stream.tell()
        try:
            index, tag_type = self.read_tag()
        except OutOfBoundsError:
            self.stream.seek(pos)
            raise
        if index != expected_index or tag_type != expected_type:
            self.stream.seek(pos)  # Rewind
            raise TagMismatchError(
                f"Expected tag ({expected_index}, {expected_type.name}), "
                f"got ({index}, {_type_name(tag_type)}) at position {pos}"
            )

    def check_tag(self, expected_index: int, expected_type: TagType) -> bool:
        """Check if next tag matches, without consuming it."""
        if self.bytes_remaining() <= 0:
            return False
        pos = self.stream.tell()
        try:
            index, tag_type = self.read_tag()
            return index == expected_index and tag_type == expected_type
        except OutOfBoundsError:
            return False
        finally:
            self.stream.seek(pos)

    # -------------------------------------------------------------------------
    # Value Reading
    # -------------------------------------------------------------------------

    def read_bool(self, index: int) -> bool:
        """Read a tagged boolean."""
        self.expect_tag(index, TagType.Byte1)
        return self.stream.read_bool()

    def read_byte(self, index: int) -> int:
        """Read a tagged byte."""
        self.expect_tag(index, TagType.Byte1)
        return self.stream.read_uint8()

    def read_int(self, index: int) -> int:
        """Read a tagged 4-byte integer."""
        self.expect_tag(index, TagType.Byte4)
        return self.stream.read_uint32()

    def read_float(self, index: int) -> float:
        """Read a tagged 4-byte float."""
        self.expect_tag(index, TagType.Byte4)
        return self.stream.read_float32()

    def read_double(self, index: int) -> float:
        """Read a tagged 8-byte double."""
        self.expect_tag(index, TagType.Byte8)
        return self.stream.read_float64()

    def read_id(self, index: int) -> CrdtId:
        """Read a tagged CRDT ID."""
        self.expect_tag(index, TagType.ID)
        return self.stream.read_crdt_id()

    def read_lww_bool(self, index: int) -> bool:
        """
        Read a last-writer-wins boolean subblock.

        The timestamp is discarded and any trailing fields are skipped.
        """
        end = self.read_subblock(index)
        _timestamp = self.read_id(1)
        value = self.read_bool(2)
        self.stream.seek(end)
        return value

    # -------------------------------------------------------------------------
    # Block Reading
    # -------------------------------------------------------------------------

    def read_block_header(self) -> Optional[tuple[int, int, int, int]]:
        """
        Read a main block header.
        Returns (block_type, length, min_version, current_version) or None
        if the header is cut short.
        """
        try:
            length = self.stream.read_uint32()
            _unknown = self.stream.read_uint8()  # Always 0
            min_version = self.stream.read_uint8()
            current_version = self.stream.read_uint8()
            block_type = self.stream.read_uint8()
        except OutOfBoundsError:
            return None

        return block_type, length, min_version, current_version

    def read_subblock(self, index: int, clamp: bool = False) -> int:
        """
        Read a subblock tag and length, return the subblock end offset.

        With clamp, a subblock running past its block ends at the block end
        instead of raising.
        """
        self.expect_tag(index, TagType.Length4)
        length = self.stream.read_uint32()
        end = self.stream.tell() + length
        if self.block_end is not None and end > self.block_end:
            if clamp:
                return self.block_end
            raise MalformedSubblockError(
                f"Subblock {index} ends at {end}, past block end {self.block_end}"
            )
        return end

    def has_subblock(self, index: int) -> bool:
        """Check if a subblock with given index is next."""
        return self.check_tag(index, TagType.Length4)

    def skip_subblock(self, index: int) -> None:
        """Skip over a subblock without reading its contents."""
        self.stream.seek(self.read_subblock(index))
