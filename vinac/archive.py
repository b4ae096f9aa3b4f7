"""Archive files: insertion, replacement, extraction, removal and reordering."""

from __future__ import annotations

import os
import time
from typing import BinaryIO

from vinac import lz
from vinac.directory import Directory, Member, move_data

__all__ = ["Archive", "ArchiveError", "format_member"]


class ArchiveError(Exception):
    """Raised when an archive operation cannot be carried out."""


def format_member(member: Member) -> str:
    """One line describing a member, as the content listing shows it."""
    flag = "Sim" if member.compressed else "Não"
    return (
        f"Nome: {member.name}, Id: {member.uid}, Tamanho original: {member.size}, "
        f"Tamanho armazenado: {member.stored_size}, "
        f"Última modificação: {time.ctime(member.mtime)}, "
        f"Offset: {member.offset}, Comprimido: {flag}"
    )


class Archive:
    """An open archive file together with its directory."""

    def __init__(self, path: str | os.PathLike[str], fp: BinaryIO, directory: Directory) -> None:
        self.path = os.fspath(path)
        self.directory = directory
        self._fp = fp

    @classmethod
    def open(cls, path: str | os.PathLike[str], create: bool = False) -> Archive:
        """Open an existing archive, or a new empty one when create is set."""
        try:
            fp = open(path, "r+b")
        except FileNotFoundError:
            if not create:
                raise ArchiveError(f"archive {os.fspath(path)} not found") from None
            fp = open(path, "w+b")
        try:
            directory = Directory.read(fp)
        except ValueError as exc:
            fp.close()
            raise ArchiveError(f"invalid archive {os.fspath(path)}: {exc}") from exc
        return cls(path, fp, directory)

    def close(self) -> None:
        self._fp.close()

    def __enter__(self) -> Archive:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _index(self, name: str) -> int:
        index = self.directory.find(name)
        if index is None:
            raise ArchiveError(f"member {name} not found")
        return index

    def _placed(self, skip: int | None = None) -> list[tuple[Member, int]]:
        return [(member, member.offset)
                for position, member in enumerate(self.directory)
                if position != skip]

    def _payload(self, member: Member) -> bytes:
        self._fp.seek(member.offset)
        data = self._fp.read(member.stored_size)
        if len(data) != member.stored_size:
            raise ArchiveError(f"data of member {member.name} is truncated")
        return data

    def _apply_layout(self, placed: list[tuple[Member, int]],
                      payloads: list[tuple[Member, bytes]]) -> None:
        """Shift stored data to the new offsets, write new data, then the directory."""
        self.directory.calc_offsets()
        moves = [(old, member.offset, member.stored_size) for member, old in placed]
        for old, new, size in reversed(moves):
            if new > old:
                move_data(self._fp, old, new, size)
        for old, new, size in moves:
            if new < old:
                move_data(self._fp, old, new, size)
        for member, data in payloads:
            self._fp.seek(member.offset)
            self._fp.write(data)
        if len(self.directory) == 0:
            self._fp.truncate(0)
        else:
            end = self.directory.header_size() + sum(m.stored_size for m in self.directory)
            self._fp.truncate(end)
            self.directory.write(self._fp)
        self._fp.flush()

    def insert(self, path: str | os.PathLike[str], compress: bool = False) -> Member:
        """Store the file at path, replacing a member of the same name."""
        try:
            member = Member.from_path(path)
        except OSError as exc:
            raise ArchiveError(f"cannot read {os.fspath(path)}: {exc}") from exc
        try:
            member.pack()
        except ValueError as exc:
            raise ArchiveError(str(exc)) from exc
        with open(path, "rb") as source:
            data = source.read(member.size)
        if len(data) != member.size:
            raise ArchiveError(f"error reading file {member.name}")

        payload = data
        if compress:
            packed = lz.compress(data)
            if len(packed) <= len(data):
                payload = packed
                member.compressed = True
        member.stored_size = len(payload)

        index = self.directory.find(member.name)
        if index is None:
            placed = self._placed()
            self.directory.add(member)
        else:
            placed = self._placed(skip=index)
            self.directory.members[index] = member
        self._apply_layout(placed, [(member, payload)])
        return member

    def extract(self, name: str) -> Member:
        """Write the member called name to a file of that name."""
        member = self.directory[self._index(name)]
        raw = self._payload(member)
        if member.compressed:
            try:
                data = lz.uncompress(raw, member.size)
            except ValueError as exc:
                raise ArchiveError(f"member {name} is corrupt: {exc}") from exc
        else:
            data = raw
        with open(member.name, "wb") as target:
            target.write(data)
        return member

    def extract_all(self) -> list[Member]:
        """Extract every member in directory order."""
        return [self.extract(member.name) for member in list(self.directory)]

    def remove(self, name: str) -> Member:
        """Delete the member called name and close the gap it leaves."""
        index = self._index(name)
        placed = self._placed(skip=index)
        removed = self.directory.remove(index)
        self._apply_layout(placed, [])
        return removed

    def move(self, name: str, target: str | None = None) -> None:
        """Place the member right after target, or first when target is None."""
        index = self._index(name)
        if target is None:
            destination = 0
        else:
            target_index = self._index(target)
            if target_index == index:
                return
            destination = target_index + 1 if target_index < index else target_index
        moved = self.directory[index]
        data = self._payload(moved)
        placed = self._placed(skip=index)
        self.directory.reorder(index, destination)
        self._apply_layout(placed, [(moved, data)])

    def listing(self) -> list[str]:
        """One formatted line per member."""
        return [format_member(member) for member in self.directory]