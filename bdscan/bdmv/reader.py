"""Big-endian binary readers for parsing Blu-ray BDMV structures."""

from __future__ import annotations

import struct
from pathlib import Path
from typing import BinaryIO, Union

from bdscan.errors import FormatError, ReaderOpenError, ShortReadError


class BinaryReader:
    """Reads big-endian binary data with cursor tracking and helpful errors.

    Subclasses provide the storage: ``_size`` and :meth:`_fetch`.  Every read
    is bounds-checked up front, so a short read never returns partial data.
    """

    _size: int
    _pos: int

    # -- storage --

    def _fetch(self, pos: int, n: int) -> bytes:
        raise NotImplementedError

    @property
    def name(self) -> str:
        return "bytes"

    # -- context manager --

    def __enter__(self) -> BinaryReader:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying storage."""

    # -- cursor --

    def tell(self) -> int:
        """Return the current absolute read position."""
        return self._pos

    def seek(self, offset: int) -> None:
        """Set the absolute read position."""
        if offset < 0 or offset > self._size:
            raise ShortReadError(f"seek to offset {offset} out of range [0, {self._size}]")
        self._pos = offset

    def skip(self, n: int) -> None:
        """Advance the read position by *n* bytes."""
        if n < 0:
            raise ShortReadError(f"cannot skip a negative byte count ({n})")
        self.require(n)
        self._pos += n

    @property
    def remaining(self) -> int:
        """Number of unread bytes from the current position."""
        return self._size - self._pos

    # -- guards --

    def require(self, n: int) -> None:
        """Raise if fewer than *n* bytes remain at the current position."""
        if self._size - self._pos < n:
            raise ShortReadError(
                f"need {n} bytes at offset {self._pos}, but only {self._size - self._pos} remain"
            )

    # -- primitive reads (big-endian) --

    def read_bytes(self, n: int) -> bytes:
        """Read *n* raw bytes and advance the cursor."""
        self.require(n)
        data = self._fetch(self._pos, n)
        if len(data) != n:
            raise ShortReadError(f"short read at offset {self._pos}: wanted {n}, got {len(data)}")
        self._pos += n
        return data

    def _read_fmt(self, fmt: str, size: int) -> int:
        (value,) = struct.unpack(fmt, self.read_bytes(size))
        return value

    def u8(self) -> int:
        """Read an unsigned 8-bit integer."""
        return self._read_fmt(">B", 1)

    def u16(self) -> int:
        """Read a big-endian unsigned 16-bit integer."""
        return self._read_fmt(">H", 2)

    def u32(self) -> int:
        """Read a big-endian unsigned 32-bit integer."""
        return self._read_fmt(">I", 4)

    # -- string reads --

    def read_string(self, n: int) -> str:
        """Read *n* bytes and decode as ASCII, stripping null bytes."""
        offset = self._pos
        raw = self.read_bytes(n)
        try:
            return raw.replace(b"\x00", b"").decode("ascii")
        except UnicodeDecodeError:
            raise FormatError(f"non-ASCII text {raw!r} at offset {offset}") from None

    # -- repr --

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name}, pos={self.tell()}, remaining={self.remaining})"


class BytesReader(BinaryReader):
    """Reader over an in-memory buffer."""

    __slots__ = ("_data", "_pos", "_size")

    def __init__(self, data: Union[bytes, bytearray, memoryview]) -> None:
        self._data = memoryview(data) if not isinstance(data, memoryview) else data
        self._pos = 0
        self._size = len(self._data)

    def _fetch(self, pos: int, n: int) -> bytes:
        return bytes(self._data[pos : pos + n])

    def close(self) -> None:
        self._data.release()


class FileReader(BinaryReader):
    """Reader that seeks within one open file instead of loading it whole."""

    __slots__ = ("_fh", "_path", "_pos", "_size")

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)
        try:
            self._fh: BinaryIO = self._path.open("rb")
        except OSError as e:
            raise ReaderOpenError(f"cannot open {self._path}: {e}") from e
        try:
            self._size = self._fh.seek(0, 2)
            self._fh.seek(0)
        except OSError as e:
            self._fh.close()
            raise ReaderOpenError(f"cannot seek in {self._path}: {e}") from e
        self._pos = 0

    @property
    def name(self) -> str:
        return str(self._path)

    @property
    def closed(self) -> bool:
        return self._fh.closed

    def _fetch(self, pos: int, n: int) -> bytes:
        try:
            self._fh.seek(pos)
            return self._fh.read(n)
        except OSError as e:
            raise ShortReadError(f"read of {n} bytes at offset {pos} failed: {e}") from e

    def close(self) -> None:
        self._fh.close()


def open_reader(source: Union[bytes, bytearray, memoryview, str, Path]) -> BinaryReader:
    """Return a reader for *source*: a file path or an in-memory buffer."""
    if isinstance(source, (str, Path)):
        return FileReader(source)
    return BytesReader(source)
