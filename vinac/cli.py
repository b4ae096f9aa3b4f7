"""Command line front end for vinac archives."""

from __future__ import annotations

import argparse
import os
import sys
from typing import Callable, Sequence

from vinac.archive import Archive, ArchiveError

__all__ = ["main"]

_NO_TARGET = "NULL"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vinac",
        description="Store, compress, extract, reorder and remove files in an archive.",
    )
    actions = parser.add_mutually_exclusive_group(required=True)
    actions.add_argument("-p", dest="insert", metavar="ARCHIVE",
                         help="insert members without compression")
    actions.add_argument("-i", dest="insert_compressed", metavar="ARCHIVE",
                         help="insert members with compression")
    actions.add_argument("-m", dest="move", metavar="ARCHIVE",
                         help="move a member right after a target member (or first)")
    actions.add_argument("-x", dest="extract", metavar="ARCHIVE",
                         help="extract the named members, or all of them")
    actions.add_argument("-r", dest="remove", metavar="ARCHIVE",
                         help="remove the named members")
    actions.add_argument("-c", dest="listing", metavar="ARCHIVE", nargs="?", const="",
                         help="list the archive contents")
    parser.add_argument("members", nargs="*", help="member files")
    return parser


def _insert(archive_path: str, members: list[str], compress: bool) -> int:
    with Archive.open(archive_path, create=True) as archive:
        for path in members:
            archive.insert(path, compress=compress)
    return 0


def _run_insert(archive_path: str, members: list[str]) -> int:
    return _insert(archive_path, members, compress=False)


def _run_insert_compressed(archive_path: str, members: list[str]) -> int:
    print("Inserção com compressão foi selecionada")
    for path in members:
        if not os.path.exists(path):
            print(f"Erro: o arquivo '{path}' não existe.", file=sys.stderr)
            return 1
    return _insert(archive_path, members, compress=True)


def _run_move(archive_path: str, members: list[str]) -> int:
    if not os.path.exists(archive_path):
        print("Arquivo não encontrado.", file=sys.stderr)
        return 1
    if not members:
        print("Uso: -m <membro> <destino>", file=sys.stderr)
        return 1
    name = members[0]
    target = members[1] if len(members) > 1 and members[1] != _NO_TARGET else None
    with Archive.open(archive_path) as archive:
        if archive.directory.find(name) is None:
            print(f"Erro: membro {name} não encontrado", file=sys.stderr)
            return 1
        archive.move(name, target)
    return 0


def _run_extract(archive_path: str, members: list[str]) -> int:
    with Archive.open(archive_path) as archive:
        if not members:
            print("Extração")
            archive.extract_all()
            return 0
        print("Extração dos seguintes membros")
        for name in members:
            if archive.directory.find(name) is not None:
                print(f"- {name}")
                archive.extract(name)
    return 0


def _run_remove(archive_path: str, members: list[str]) -> int:
    print("Remoção dos seguintes membros")
    with Archive.open(archive_path) as archive:
        for name in members:
            if archive.directory.find(name) is not None:
                print(name)
                archive.remove(name)
    return 0


def _run_listing(archive_path: str, members: list[str]) -> int:
    print("Archive possui os seguintes conteúdos")
    if not archive_path or not os.path.exists(archive_path):
        print("Diretorio vazio")
        return 0
    with Archive.open(archive_path) as archive:
        for line in archive.listing():
            print(line)
    return 0


_HANDLERS: dict[str, Callable[[str, list[str]], int]] = {
    "insert": _run_insert,
    "insert_compressed": _run_insert_compressed,
    "move": _run_move,
    "extract": _run_extract,
    "remove": _run_remove,
    "listing": _run_listing,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Run the archiver with the given arguments; return the exit status."""
    args = _build_parser().parse_args(argv)
    members = list(args.members)
    for dest, handler in _HANDLERS.items():
        archive_path = getattr(args, dest)
        if archive_path is None:
            continue
        try:
            return handler(archive_path, members)
        except ArchiveError as exc:
            print(f"Erro: {exc}", file=sys.stderr)
            return 1
    return 2


if __name__ == "__main__":
    sys.exit(main())