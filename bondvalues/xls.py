"""A reader for the cell values of legacy Excel (BIFF8) workbooks."""

from __future__ import annotations

import math
import re
import struct
from collections.abc import Iterable, Iterator
from datetime import datetime, timedelta
from pathlib import Path
from typing import Union

Cell = Union[str, float, bool, datetime, None]

_SIGNATURE = bytes.fromhex("D0CF11E0A1B11AE1")
_MAX_REGULAR_SECTOR = 0xFFFFFFFA
_STREAM_NAMES = ("Workbook", "Book")

_BOF = 0x0809
_EOF = 0x000A
_CONTINUE = 0x003C
_DATEMODE = 0x0022
_FORMAT = 0x041E
_XF = 0x00E0
_BOUNDSHEET = 0x0085
_SST = 0x00FC
_LABELSST = 0x00FD
_LABEL = 0x0204
_NUMBER = 0x0203
_RK = 0x027E
_MULRK = 0x00BD
_FORMULA = 0x0006
_STRING = 0x0207
_BOOLERR = 0x0205

_BUILTIN_DATE_FORMATS = frozenset(
    [*range(14, 23), *range(27, 37), 45, 46, 47, *range(50, 59)]
)


class XlsError(Exception):
    """The file is not a readable BIFF8 workbook."""


def excel_serial_to_datetime(serial: float, date1904: bool = False) -> datetime:
    """Convert an Excel date serial number to a datetime."""
    if date1904:
        base = datetime(1904, 1, 1)
    else:
        base = datetime(1899, 12, 30)
        if serial < 60:
            serial += 1
    return base + timedelta(milliseconds=round(serial * 86_400_000))


def _read_compound_stream(data: bytes, names: Iterable[str]) -> bytes:
    if len(data) < 512 or data[:8] != _SIGNATURE:
        raise XlsError("not an OLE2 compound document")
    sector_shift, mini_shift = struct.unpack_from("<HH", data, 0x1E)
    sector_size = 1 << sector_shift
    mini_size = 1 << mini_shift
    num_fat, first_dir = struct.unpack_from("<II", data, 0x2C)
    mini_cutoff, first_minifat, num_minifat, first_difat, num_difat = struct.unpack_from(
        "<IIIII", data, 0x38
    )
    per_sector = sector_size // 4

    def sector(number: int) -> bytes:
        offset = (number + 1) * sector_size
        if offset >= len(data):
            raise XlsError(f"sector {number} lies beyond the end of the file")
        return data[offset:offset + sector_size].ljust(sector_size, b"\0")

    def words(raw: bytes) -> tuple[int, ...]:
        return struct.unpack(f"<{len(raw) // 4}I", raw)

    fat_sectors = list(struct.unpack_from("<109I", data, 0x4C))
    next_difat = first_difat
    for _ in range(num_difat):
        if next_difat > _MAX_REGULAR_SECTOR:
            break
        entries = words(sector(next_difat))
        fat_sectors.extend(entries[:-1])
        next_difat = entries[-1]

    fat = [entry for number in fat_sectors[:num_fat] for entry in words(sector(number))]

    def chain(start: int, table: list[int]) -> Iterator[int]:
        seen: set[int] = set()
        number = start
        while number <= _MAX_REGULAR_SECTOR:
            if number in seen or number >= len(table):
                raise XlsError("corrupt sector chain")
            seen.add(number)
            yield number
            number = table[number]

    directory = b"".join(sector(n) for n in chain(first_dir, fat))
    entries = []
    for offset in range(0, len(directory) - 127, 128):
        raw = directory[offset:offset + 128]
        name_len = struct.unpack_from("<H", raw, 64)[0]
        name = raw[:max(name_len - 2, 0)].decode("utf-16-le", errors="replace")
        start, size = struct.unpack_from("<II", raw, 116)
        entries.append((name, raw[66], start, size))
    if not entries:
        raise XlsError("empty directory")

    wanted = set(names)
    _, _, root_start, root_size = entries[0]
    for name, entry_type, start, size in entries:
        if entry_type != 2 or name not in wanted:
            continue
        if size >= mini_cutoff:
            return b"".join(sector(n) for n in chain(start, fat))[:size]
        ministream = b"".join(sector(n) for n in chain(root_start, fat))[:root_size]
        minifat = (
            [e for n in chain(first_minifat, fat) for e in words(sector(n))]
            if num_minifat
            else []
        )
        return b"".join(
            ministream[n * mini_size:(n + 1) * mini_size] for n in chain(start, minifat)
        )[:size]
    raise XlsError("workbook stream not found")


def _records(stream: bytes, pos: int = 0) -> Iterator[tuple[int, bytes]]:
    while pos + 4 <= len(stream):
        record_id, length = struct.unpack_from("<HH", stream, pos)
        yield record_id, stream[pos + 4:pos + 4 + length]
        pos += 4 + length


def _merge_continues(records: Iterable[tuple[int, bytes]]) -> Iterator[tuple[int, list[bytes]]]:
    current: tuple[int, list[bytes]] | None = None
    for record_id, payload in records:
        if record_id == _CONTINUE and current is not None:
            current[1].append(payload)
            continue
        if current is not None:
            yield current
        current = (record_id, [payload])
        if record_id == _EOF:
            yield current
            return
    if current is not None:
        yield current


class _ChunkReader:
    """Reads SST data that is split over CONTINUE records."""

    def __init__(self, chunks: list[bytes]):
        self.chunks = chunks
        self.index = 0
        self.pos = 0

    def _advance(self) -> bytes:
        self.index += 1
        self.pos = 0
        if self.index >= len(self.chunks):
            raise XlsError("shared string table is truncated")
        return self.chunks[self.index]

    def read(self, count: int) -> bytes:
        parts = []
        while count:
            chunk = self.chunks[self.index]
            if self.pos >= len(chunk):
                chunk = self._advance()
            piece = chunk[self.pos:self.pos + count]
            self.pos += len(piece)
            count -= len(piece)
            parts.append(piece)
        return b"".join(parts)

    def read_chars(self, count: int, wide: bool) -> str:
        parts = []
        while count:
            chunk = self.chunks[self.index]
            if self.pos >= len(chunk):
                chunk = self._advance()
                wide = bool(chunk[0] & 1)
                self.pos = 1
            width = 2 if wide else 1
            take = min((len(chunk) - self.pos) // width, count)
            if take == 0:
                raise XlsError("malformed string in shared string table")
            raw = chunk[self.pos:self.pos + take * width]
            self.pos += take * width
            count -= take
            parts.append(raw.decode("utf-16-le" if wide else "latin-1"))
        return "".join(parts)


def _parse_sst(chunks: list[bytes]) -> list[str]:
    reader = _ChunkReader(chunks)
    _, unique = struct.unpack("<II", reader.read(8))
    strings = []
    for _ in range(unique):
        count, flags = struct.unpack("<HB", reader.read(3))
        runs = struct.unpack("<H", reader.read(2))[0] if flags & 0x08 else 0
        extra = struct.unpack("<I", reader.read(4))[0] if flags & 0x04 else 0
        strings.append(reader.read_chars(count, bool(flags & 1)))
        reader.read(4 * runs + extra)
    return strings


def _unicode(buf: bytes, offset: int, length_size: int) -> str:
    count = buf[offset] if length_size == 1 else struct.unpack_from("<H", buf, offset)[0]
    offset += length_size
    flags = buf[offset]
    offset += 1
    if flags & 0x08:
        offset += 2
    if flags & 0x04:
        offset += 4
    if flags & 1:
        return buf[offset:offset + 2 * count].decode("utf-16-le")
    return buf[offset:offset + count].decode("latin-1")


def _is_date_format(text: str) -> bool:
    cleaned = re.sub(r'"[^"]*"|\[[^\]]*\]|\\.|_.|\*.', "", text).lower().replace("general", "")
    return any(letter in cleaned for letter in "dmyhs")


def _decode_rk(raw: int) -> float:
    if raw & 2:
        number = raw >> 2
        if raw & 0x80000000:
            number -= 1 << 30
        value = float(number)
    else:
        value = struct.unpack("<d", struct.pack("<Q", (raw & 0xFFFFFFFC) << 32))[0]
    return value / 100 if raw & 1 else value


class Workbook:
    """An opened workbook whose worksheets can be read as rows of cells."""

    def __init__(self, stream: bytes):
        self._stream = stream
        self._sheets: dict[str, int] = {}
        self._strings: list[str] = []
        self._xf_formats: list[int] = []
        self._date1904 = False
        formats: dict[int, str] = {}

        records = _records(stream)
        first = next(records, None)
        if first is None or first[0] != _BOF:
            raise XlsError("workbook stream does not start with a BOF record")
        for record_id, chunks in _merge_continues(records):
            payload = chunks[0]
            if record_id == _EOF:
                break
            if record_id == _DATEMODE:
                self._date1904 = struct.unpack_from("<H", payload)[0] == 1
            elif record_id == _FORMAT:
                formats[struct.unpack_from("<H", payload)[0]] = _unicode(payload, 2, 2)
            elif record_id == _XF:
                self._xf_formats.append(struct.unpack_from("<H", payload, 2)[0])
            elif record_id == _BOUNDSHEET:
                offset, options = struct.unpack_from("<IH", payload)
                if options >> 8 == 0:
                    self._sheets[_unicode(payload, 6, 1)] = offset
            elif record_id == _SST:
                self._strings = _parse_sst(chunks)

        self._date_xfs = frozenset(
            xf
            for xf, fmt in enumerate(self._xf_formats)
            if fmt in _BUILTIN_DATE_FORMATS or _is_date_format(formats.get(fmt, ""))
        )

    @property
    def sheet_names(self) -> list[str]:
        """Names of the worksheets, in workbook order."""
        return list(self._sheets)

    def _number(self, xf: int, value: float) -> Cell:
        if xf in self._date_xfs and math.isfinite(value) and value >= 0:
            return excel_serial_to_datetime(value, self._date1904)
        return value

    def worksheet(self, name: str) -> list[list[Cell]]:
        """Return the used range of a worksheet as a list of rows.

        The range starts at the first used row and column; empty cells are None.
        """
        if name not in self._sheets:
            raise XlsError(f"worksheet not found: {name}")
        cells: dict[tuple[int, int], Cell] = {}
        pending_string: tuple[int, int] | None = None

        records = _records(self._stream, self._sheets[name])
        first = next(records, None)
        if first is None or first[0] != _BOF:
            raise XlsError(f"worksheet {name} does not start with a BOF record")
        for record_id, payload in records:
            if record_id == _EOF:
                break
            if record_id == _STRING and pending_string is not None:
                cells[pending_string] = _unicode(payload, 0, 2)
                pending_string = None
                continue
            if record_id not in (_LABELSST, _LABEL, _NUMBER, _RK, _MULRK, _FORMULA, _BOOLERR):
                continue
            row, col = struct.unpack_from("<HH", payload)
            if record_id == _LABELSST:
                index = struct.unpack_from("<I", payload, 6)[0]
                if index >= len(self._strings):
                    raise XlsError(f"shared string index {index} out of range")
                cells[row, col] = self._strings[index]
            elif record_id == _LABEL:
                cells[row, col] = _unicode(payload, 6, 2)
            elif record_id == _NUMBER:
                xf = struct.unpack_from("<H", payload, 4)[0]
                cells[row, col] = self._number(xf, struct.unpack_from("<d", payload, 6)[0])
            elif record_id == _RK:
                xf, raw = struct.unpack_from("<HI", payload, 4)
                cells[row, col] = self._number(xf, _decode_rk(raw))
            elif record_id == _MULRK:
                for position, offset in enumerate(range(4, len(payload) - 2, 6)):
                    xf, raw = struct.unpack_from("<HI", payload, offset)
                    cells[row, col + position] = self._number(xf, _decode_rk(raw))
            elif record_id == _BOOLERR:
                value, is_error = payload[6], payload[7]
                cells[row, col] = None if is_error else bool(value)
            elif record_id == _FORMULA:
                xf = struct.unpack_from("<H", payload, 4)[0]
                result = payload[6:14]
                if result[6:8] != b"\xff\xff":
                    cells[row, col] = self._number(xf, struct.unpack("<d", result)[0])
                elif result[0] == 0:
                    pending_string = (row, col)
                elif result[0] == 1:
                    cells[row, col] = bool(result[2])
                elif result[0] == 3:
                    cells[row, col] = ""

        if not cells:
            return []
        rows = [r for r, _ in cells]
        cols = [c for _, c in cells]
        return [
            [cells.get((r, c)) for c in range(min(cols), max(cols) + 1)]
            for r in range(min(rows), max(rows) + 1)
        ]


def open_workbook(path: str | Path) -> Workbook:
    """Open a BIFF8 ``.xls`` workbook from a file."""
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise XlsError(f"cannot read {path}: {exc}") from exc
    return Workbook(_read_compound_stream(data, _STREAM_NAMES))