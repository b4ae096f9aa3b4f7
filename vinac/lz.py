"""LZ77 block coder used for compressed archive members.

The stream starts with a marker byte, the least common byte of the input.
A literal equal to the marker is written as the marker followed by a zero
byte. A back reference is the marker followed by the match length and the
match offset, each as a big-endian variable-length integer of 7-bit groups.
"""

from __future__ import annotations

MAX_OFFSET = 100000

_MASK32 = 0xFFFFFFFF
_NO_INDEX = -1

__all__ = ["MAX_OFFSET", "compress", "compress_fast", "uncompress"]


def _match_length(data: bytes, pos1: int, pos2: int, minlen: int, maxlen: int) -> int:
    """Length of the common run at two positions, starting the count at minlen."""
    length = minlen
    while length < maxlen and data[pos1 + length] == data[pos2 + length]:
        length += 1
    return length


def _var_size(value: int) -> bytes:
    """Encode an unsigned 32-bit value in as few 7-bit groups as it needs."""
    value &= _MASK32
    probe = value >> 3
    num_bytes = 1
    for candidate in range(5, 1, -1):
        if probe & 0xFE000000:
            num_bytes = candidate
            break
        probe = (probe << 7) & _MASK32
    groups = []
    for shift in range(num_bytes - 1, -1, -1):
        group = (value >> (shift * 7)) & 0x7F
        if shift > 0:
            group |= 0x80
        groups.append(group)
    return bytes(groups)


def _read_var_size(data: bytes, pos: int) -> tuple[int, int]:
    """Decode a variable-length value at pos; return it and the next position."""
    value = 0
    while True:
        if pos >= len(data):
            raise ValueError("truncated variable-length value in compressed stream")
        group = data[pos]
        pos += 1
        value = ((value << 7) | (group & 0x7F)) & _MASK32
        if not group & 0x80:
            return value, pos


def _choose_marker(data: bytes) -> int:
    histogram = [0] * 256
    for byte in data:
        histogram[byte] += 1
    return min(range(256), key=histogram.__getitem__)


def _good_match(length: int, offset: int) -> bool:
    return (
        length >= 8
        or (length == 4 and offset <= 0x7F)
        or (length == 5 and offset <= 0x3FFF)
        or (length == 6 and offset <= 0x1FFFFF)
        or (length == 7 and offset <= 0xFFFFFFF)
    )


def _emit_literal(out: bytearray, symbol: int, marker: int) -> None:
    out.append(symbol)
    if symbol == marker:
        out.append(0)


def _encode(data: bytes, find_match) -> bytes:
    """Drive the shared coding loop; find_match(inpos, bytesleft) gives (length, offset)."""
    size = len(data)
    if size < 1:
        return b""

    marker = _choose_marker(data)
    out = bytearray([marker])
    inpos = 0
    bytesleft = size

    while True:
        length, offset = find_match(inpos, bytesleft)
        if _good_match(length, offset):
            out.append(marker)
            out += _var_size(length)
            out += _var_size(offset)
            inpos += length
            bytesleft -= length
        else:
            _emit_literal(out, data[inpos], marker)
            inpos += 1
            bytesleft -= 1
        if bytesleft <= 3:
            break

    for symbol in data[inpos:]:
        _emit_literal(out, symbol, marker)
    return bytes(out)


def compress(data: bytes) -> bytes:
    """Compress data with an exhaustive search of the history window."""
    data = bytes(data)
    size = len(data)

    def find_match(inpos: int, bytesleft: int) -> tuple[int, int]:
        maxoffset = min(inpos, MAX_OFFSET)
        bestlength, bestoffset = 3, 0
        first = data[inpos]
        for offset in range(3, maxoffset + 1):
            candidate = inpos - offset
            if data[candidate] != first:
                continue
            probe = inpos + bestlength
            if probe >= size or data[probe] != data[candidate + bestlength]:
                continue
            length = _match_length(data, inpos, candidate, 0, min(bytesleft, offset))
            if length > bestlength:
                bestlength, bestoffset = length, offset
        return bestlength, bestoffset

    return _encode(data, find_match)


def compress_fast(data: bytes) -> bytes:
    """Compress data, following a table of earlier positions of each byte pair."""
    data = bytes(data)
    size = len(data)
    if size < 1:
        return b""

    last_index: dict[int, int] = {}
    jump_table = [_NO_INDEX] * size
    for i in range(size - 1):
        pair = (data[i] << 8) | data[i + 1]
        jump_table[i] = last_index.get(pair, _NO_INDEX)
        last_index[pair] = i

    def find_match(inpos: int, bytesleft: int) -> tuple[int, int]:
        bestlength, bestoffset = 3, 0
        index = jump_table[inpos]
        while index != _NO_INDEX and inpos - index < MAX_OFFSET:
            probe = inpos + bestlength
            if probe < size and data[index + bestlength] == data[probe]:
                offset = inpos - index
                length = _match_length(data, inpos, index, 2, min(bytesleft, offset))
                if length > bestlength:
                    bestlength, bestoffset = length, offset
            index = jump_table[index]
        return bestlength, bestoffset

    return _encode(data, find_match)


def uncompress(data: bytes, size: int) -> bytes:
    """Decode a compressed stream that must expand to exactly size bytes."""
    data = bytes(data)
    if not data:
        if size != 0:
            raise ValueError(f"compressed stream is empty, expected {size} bytes")
        return b""

    marker = data[0]
    inpos = 1
    out = bytearray()

    while True:
        if inpos >= len(data):
            raise ValueError("compressed stream is truncated")
        symbol = data[inpos]
        inpos += 1
        if symbol != marker:
            out.append(symbol)
        else:
            if inpos >= len(data):
                raise ValueError("compressed stream ends after a marker byte")
            if data[inpos] == 0:
                out.append(marker)
                inpos += 1
            else:
                length, inpos = _read_var_size(data, inpos)
                offset, inpos = _read_var_size(data, inpos)
                if offset == 0 or offset > len(out):
                    raise ValueError(f"back reference offset {offset} is out of range")
                start = len(out) - offset
                if offset >= length:
                    out += out[start:start + length]
                else:
                    for i in range(length):
                        out.append(out[start + i])
        if inpos >= len(data):
            break

    if len(out) != size:
        raise ValueError(f"stream expands to {len(out)} bytes, expected {size}")
    return bytes(out)