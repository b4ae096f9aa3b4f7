# vinac

`vinac` keeps several files together in one archive file. Each file in the
archive is a *member*. A member is stored either as it is or compressed with
an LZ77 coder. The archive begins with a directory that records, for every
member, its name, owner id, original size, stored size, modification time,
the offset where its data begins, and whether it is compressed. The member
data follows the directory, back to back, in directory order.

## Installation

```
pip install .
```

No third-party libraries are needed.

## Command line

```
vinac -p ARCHIVE FILE...      insert files without compression
vinac -i ARCHIVE FILE...      insert files with compression
vinac -m ARCHIVE MEMBER [TARGET]
                              move MEMBER to just after TARGET
                              (to the front when TARGET is missing or NULL)
vinac -x ARCHIVE [MEMBER...]  extract the named members, or all of them
vinac -r ARCHIVE MEMBER...    remove members
vinac -c [ARCHIVE]            list the contents
```

Exactly one of these options is given per run. The same is available as
`python -m vinac.cli`.

- `-p` and `-i` create the archive if it does not exist. Inserting a file
  whose name is already in the archive replaces that member where it stands.
  With `-i`, a member is stored uncompressed when compression would make it
  larger; `-i` also refuses to start if any of the named files is missing.
- `-x` writes each member to a file at the path stored as its name, relative
  to the current directory. Names not in the archive are skipped.
- `-r` skips names that are not in the archive. Removing the last member
  leaves an empty archive file.
- `-m` reports an error if the archive or the member does not exist.
- `-c` prints one line per member; if the archive does not exist it says the
  directory is empty.

Messages and listings are printed in Portuguese. The command exits with
status 0 on success and 1 on an error.

## Library

```python
from vinac.archive import Archive

with Archive.open("backup.vc", create=True) as archive:
    archive.insert("notes.txt", compress=True)
    archive.insert("photo.jpg")
    archive.move("photo.jpg")            # put it first
    archive.move("notes.txt", "photo.jpg")
    for line in archive.listing():
        print(line)
    archive.extract("notes.txt")
    archive.remove("photo.jpg")
```

`Archive.open` raises `ArchiveError` when the archive is missing (without
`create=True`) or its directory is damaged; the other methods raise it for
unknown members, unreadable files and corrupt compressed data.
`Archive.extract_all` extracts every member, and `Archive.directory` is the
`vinac.directory.Directory` of `Member` records.

The compressor is also usable on its own:

```python
from vinac import lz

packed = lz.compress(b"abcabcabcabcabcabc")
assert lz.uncompress(packed, 18) == b"abcabcabcabcabcabc"
```

`lz.compress_fast` writes the same format and uses a table of earlier
byte-pair positions to find matches faster. `lz.uncompress` raises
`ValueError` if the stream is malformed or does not expand to the given size.

## Limits

- Member names are at most 1023 bytes and are stored exactly as given on the
  command line; directories are not walked, so each member is a single file.
- Each member is read, compressed and written whole in memory.
- The directory layout uses fixed-size little-endian records, so archives are
  not meant to be exchanged with other tools.

## Running the tests

```
pip install ".[test]"
pytest
```