"""Member records and the directory stored at the head of an archive.

An archive starts with a little-endian 64-bit member count followed by one
fixed-size record per member; the member data follows the directory,
stored back to back in directory order.
"""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass, field
from typing import BinaryIO, Iterator

NAME_SIZE = 1024

_MEMBER = struct.Struct("<1024sI4xqqqQi4x")
_COUNT = struct.Struct("<Q")

MEMBER_SIZE = _MEMBER.size
COUNT_SIZE = _COUNT.size

__all__ = [
    "COUNT_SIZE",
    "MEMBER_SIZE",
    "NAME_SIZE",
    "Directory",
    "Member",
    "move_data",
]


@dataclass
class Member:
    """One file stored in an archive."""

    name: str
    uid: int = 0
    size: int = 0
    stored_size: int = 0
    mtime: int = 0
    offset: int = 0
    compressed: bool = False

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> Member:
        """Describe the file at path as an uncompressed member."""
        st = os.stat(path)
        return cls(
            name=os.fsdecode(path),
            uid=st.st_uid,
            size=st.st_size,
            stored_size=st.st_size,
            mtime=int(st.st_mtime),
        )

    def pack(self) -> bytes:
        """Encode the member as a fixed-size directory record."""
        raw_name = os.fsencode(self.name)
        if len(raw_name) >= NAME_SIZE:
            raise ValueError(f"member name is longer than {NAME_SIZE - 1} bytes: {self.name!r}")
        return _MEMBER.pack(
            raw_name,
            self.uid & 0xFFFFFFFF,
            self.size,
            self.stored_size,
            self.mtime,
            self.offset,
            int(self.compressed),
        )

    @classmethod
    def unpack(cls, data: bytes) -> Member:
        """Decode a directory record produced by pack."""
        if len(data) != MEMBER_SIZE:
            raise ValueError(f"member record must be {MEMBER_SIZE} bytes, got {len(data)}")
        raw_name, uid, size, stored_size, mtime, offset, compressed = _MEMBER.unpack(data)
        return cls(
            name=os.fsdecode(raw_name.split(b"\0", 1)[0]),
            uid=uid,
            size=size,
            stored_size=stored_size,
            mtime=mtime,
            offset=offset,
            compressed=bool(compressed),
        )


@dataclass
class Directory:
    """The ordered list of members kept at the head of an archive."""

    members: list[Member] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[Member]:
        return iter(self.members)

    def __getitem__(self, index: int) -> Member:
        return self.members[index]

    def add(self, member: Member) -> int | None:
        """Append member unless one of that name exists; return the existing index, if any."""
        index = self.find(member.name)
        if index is not None:
            return index
        self.members.append(member)
        return None

    def find(self, name: str) -> int | None:
        """Index of the member called name, or None."""
        return next((i for i, member in enumerate(self.members) if member.name == name), None)

    def header_size(self) -> int:
        """Bytes taken by the count and the member records."""
        return COUNT_SIZE + MEMBER_SIZE * len(self.members)

    def calc_offsets(self) -> None:
        """Lay the member data out back to back right after the directory."""
        offset = self.header_size()
        for member in self.members:
            member.offset = offset
            offset += member.stored_size

    def buffer_size(self) -> int:
        """Largest original size among the members, 0 when there are none."""
        return max((member.size for member in self.members), default=0)

    def _renumber(self) -> None:
        for position, member in enumerate(self.members):
            member.uid = position

    def reorder(self, from_index: int, to_index: int) -> None:
        """Move the member at from_index to to_index and renumber all ids."""
        count = len(self.members)
        if not 0 <= from_index < count:
            raise IndexError(f"member index {from_index} out of range")
        if not 0 <= to_index < count:
            raise IndexError(f"target index {to_index} out of range")
        member = self.members.pop(from_index)
        self.members.insert(to_index, member)
        self._renumber()

    def remove(self, index: int) -> Member:
        """Drop the member at index, renumber the rest and return it."""
        if not 0 <= index < len(self.members):
            raise IndexError(f"member index {index} out of range")
        member = self.members.pop(index)
        self._renumber()
        return member

    def pack(self) -> bytes:
        """Encode the count and every member record."""
        return _COUNT.pack(len(self.members)) + b"".join(m.pack() for m in self.members)

    @classmethod
    def read(cls, fp: BinaryIO) -> Directory:
        """Read the directory at the start of fp; an empty file has no members."""
        fp.seek(0)
        head = fp.read(COUNT_SIZE)
        if not head:
            return cls()
        if len(head) < COUNT_SIZE:
            raise ValueError("archive header is truncated")
        (count,) = _COUNT.unpack(head)
        body = fp.read(count * MEMBER_SIZE)
        if len(body) != count * MEMBER_SIZE:
            raise ValueError(f"archive directory is truncated: expected {count} members")
        return cls([Member.unpack(body[start:start + MEMBER_SIZE])
                    for start in range(0, len(body), MEMBER_SIZE)])

    def write(self, fp: BinaryIO) -> None:
        """Write the directory at the start of fp."""
        fp.seek(0)
        fp.write(self.pack())


def move_data(fp: BinaryIO, source: int, target: int, size: int) -> None:
    """Copy size bytes within fp from offset source to offset target."""
    if source == target or size == 0:
        return
    fp.seek(source)
    chunk = fp.read(size)
    if len(chunk) != size:
        raise ValueError(f"expected {size} bytes at offset {source}, read {len(chunk)}")
    fp.seek(target)
    fp.write(chunk)
    fp.flush()