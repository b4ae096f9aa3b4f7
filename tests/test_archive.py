import os
from pathlib import Path

import pytest

from vinac.archive import Archive, ArchiveError, format_member
from vinac.directory import Member

A = b"alpha-" * 3
B = b"bravo"
C = b"charlie!" * 4
REPETITIVE = b"the same words again and again " * 40


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write(name, data):
    Path(name).write_bytes(data)


def _build(names_and_data, compress=False):
    archive = Archive.open("test.vc", create=True)
    for name, data in names_and_data:
        _write(name, data)
        archive.insert(name, compress=compress)
    return archive


def _extracted(archive):
    for member in archive.directory:
        Path(member.name).unlink(missing_ok=True)
    archive.extract_all()
    return {m.name: Path(m.name).read_bytes() for m in archive.directory}


def _assert_layout(archive):
    directory = archive.directory
    expected_end = directory.header_size() + sum(m.stored_size for m in directory)
    assert os.path.getsize(archive.path) == expected_end
    offset = directory.header_size()
    for member in directory:
        assert member.offset == offset
        offset += member.stored_size


def test_open_missing_without_create(workdir):
    with pytest.raises(ArchiveError):
        Archive.open("absent.vc")


def test_open_invalid_archive(workdir):
    _write("bad.vc", b"\x05\x00")
    with pytest.raises(ArchiveError):
        Archive.open("bad.vc")


def test_insert_and_extract(workdir):
    with _build([("a.txt", A), ("b.txt", B), ("c.txt", C)]) as archive:
        assert [m.name for m in archive.directory] == ["a.txt", "b.txt", "c.txt"]
        _assert_layout(archive)
        assert _extracted(archive) == {"a.txt": A, "b.txt": B, "c.txt": C}


def test_reopen_keeps_members(workdir):
    _build([("a.txt", A), ("b.txt", B)]).close()
    with Archive.open("test.vc") as archive:
        assert [m.name for m in archive.directory] == ["a.txt", "b.txt"]
        assert _extracted(archive) == {"a.txt": A, "b.txt": B}


def test_compressed_insert_round_trip(workdir):
    with _build([("a.txt", A), ("r.txt", REPETITIVE)], compress=True) as archive:
        member = archive.directory[archive.directory.find("r.txt")]
        assert member.compressed is True
        assert member.stored_size < member.size
        _assert_layout(archive)
        assert _extracted(archive) == {"a.txt": A, "r.txt": REPETITIVE}


def test_incompressible_data_stored_plain(workdir):
    data = bytes(range(256))
    with _build([("n.bin", data)], compress=True) as archive:
        member = archive.directory[0]
        assert member.compressed is False
        assert member.stored_size == len(data)
        assert _extracted(archive) == {"n.bin": data}


def test_replace_with_larger_and_smaller(workdir):
    with _build([("a.txt", A), ("b.txt", B), ("c.txt", C)]) as archive:
        bigger = b"B" * 100
        _write("b.txt", bigger)
        archive.insert("b.txt")
        assert len(archive.directory) == 3
        _assert_layout(archive)
        assert _extracted(archive) == {"a.txt": A, "b.txt": bigger, "c.txt": C}

        smaller = b"b"
        _write("b.txt", smaller)
        archive.insert("b.txt")
        _assert_layout(archive)
        assert _extracted(archive) == {"a.txt": A, "b.txt": smaller, "c.txt": C}


def test_replace_compressed_member(workdir):
    with _build([("a.txt", A), ("r.txt", REPETITIVE), ("c.txt", C)], compress=True) as archive:
        changed = b"different text repeated over " * 10
        _write("r.txt", changed)
        archive.insert("r.txt", compress=True)
        _assert_layout(archive)
        assert _extracted(archive) == {"a.txt": A, "r.txt": changed, "c.txt": C}


def test_remove_middle(workdir):
    with _build([("a.txt", A), ("b.txt", B), ("c.txt", C)]) as archive:
        removed = archive.remove("b.txt")
        assert removed.name == "b.txt"
        assert [m.name for m in archive.directory] == ["a.txt", "c.txt"]
        assert [m.uid for m in archive.directory] == [0, 1]
        _assert_layout(archive)
        assert _extracted(archive) == {"a.txt": A, "c.txt": C}


def test_remove_all_empties_file(workdir):
    with _build([("a.txt", A), ("b.txt", B)]) as archive:
        archive.remove("a.txt")
        archive.remove("b.txt")
        assert len(archive.directory) == 0
    assert os.path.getsize("test.vc") == 0
    with Archive.open("test.vc") as archive:
        assert archive.listing() == []


def test_remove_unknown(workdir):
    with _build([("a.txt", A)]) as archive:
        with pytest.raises(ArchiveError):
            archive.remove("zzz")


def test_extract_unknown(workdir):
    with _build([("a.txt", A)]) as archive:
        with pytest.raises(ArchiveError):
            archive.extract("zzz")


@pytest.mark.parametrize(
    "name, target, order",
    [
        ("c.txt", None, ["c.txt", "a.txt", "b.txt"]),
        ("a.txt", "c.txt", ["b.txt", "c.txt", "a.txt"]),
        ("c.txt", "a.txt", ["a.txt", "c.txt", "b.txt"]),
        ("a.txt", "b.txt", ["b.txt", "a.txt", "c.txt"]),
    ],
)
def test_move(workdir, name, target, order):
    with _build([("a.txt", A), ("b.txt", B), ("c.txt", C)], compress=True) as archive:
        archive.move(name, target)
        assert [m.name for m in archive.directory] == order
        assert [m.uid for m in archive.directory] == [0, 1, 2]
        _assert_layout(archive)
        assert _extracted(archive) == {"a.txt": A, "b.txt": B, "c.txt": C}


def test_move_persists(workdir):
    _build([("a.txt", A), ("b.txt", B), ("c.txt", C)]).close()
    with Archive.open("test.vc") as archive:
        archive.move("b.txt")
    with Archive.open("test.vc") as archive:
        assert [m.name for m in archive.directory] == ["b.txt", "a.txt", "c.txt"]
        assert _extracted(archive) == {"a.txt": A, "b.txt": B, "c.txt": C}


def test_move_unknown_target(workdir):
    with _build([("a.txt", A), ("b.txt", B)]) as archive:
        with pytest.raises(ArchiveError):
            archive.move("a.txt", "zzz")


def test_listing_and_format(workdir):
    with _build([("r.txt", REPETITIVE)], compress=True) as archive:
        _write("p.txt", B)
        archive.insert("p.txt")
        lines = archive.listing()
        assert len(lines) == 2
        assert lines[0].startswith("Nome: r.txt, ")
        assert lines[0].endswith("Comprimido: Sim")
        assert lines[1].endswith("Comprimido: Não")


def test_format_member_fields():
    member = Member(name="f.bin", uid=3, size=20, stored_size=12, mtime=0, offset=2152,
                    compressed=False)
    line = format_member(member)
    assert "Nome: f.bin" in line
    assert "Id: 3" in line
    assert "Tamanho original: 20" in line
    assert "Tamanho armazenado: 12" in line
    assert "Offset: 2152" in line