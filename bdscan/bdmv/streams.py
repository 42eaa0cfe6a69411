"""Decoders for the STN_table of a PlayItem and its stream entries."""

from __future__ import annotations

import logging

from bdscan.bdmv.reader import BinaryReader
from bdscan.errors import FormatError
from bdscan.model import (
    ChannelLayout,
    FrameRate,
    PayloadShape,
    SampleRate,
    StreamRecord,
    StreamType,
    VideoFormat,
)

log = logging.getLogger(__name__)

# stream_entry type -> bytes to skip before the PID
_PID_PREFIX: dict[int, int] = {
    0x01: 0,  # stream in the main path clip
    0x02: 2,  # sub path
    0x03: 1,  # sub path, in-mux
    0x04: 2,  # sub path, out-of-mux
}


def _read_lang(r: BinaryReader) -> str | None:
    # display only; undecodable bytes never fail the record
    return r.read_bytes(3).replace(b"\x00", b"").decode("ascii", "replace") or None


def _parse_stream_entry(r: BinaryReader) -> int:
    """Parse a stream_entry and return the PID, leaving *r* after the entry."""
    entry_len = r.u8()
    entry_start = r.tell()
    stream_type = r.u8()
    prefix = _PID_PREFIX.get(stream_type)
    if prefix is None:
        raise FormatError(f"unknown stream_entry type 0x{stream_type:02X} at offset {entry_start}")
    r.skip(prefix)
    pid = r.u16()
    r.seek(entry_start + entry_len)
    return pid


def _parse_stream_attrs(r: BinaryReader, pid: int) -> StreamRecord:
    """Decode the coding type and its shape-specific payload."""
    coding_type = r.u8()
    kind = StreamType.decode(coding_type)
    record = StreamRecord(pid=pid, kind=kind, coding_type=coding_type)

    shape = kind.shape
    if shape is PayloadShape.VIDEO:
        packed = r.u8()
        record.video_format = VideoFormat.decode(packed >> 4)
        record.frame_rate = FrameRate.decode(packed & 0x0F)
    elif shape is PayloadShape.AUDIO:
        packed = r.u8()
        record.channel_layout = ChannelLayout.decode(packed >> 4)
        record.sample_rate = SampleRate.decode(packed & 0x0F)
        record.language = _read_lang(r)
    elif shape is PayloadShape.GRAPHICS:
        record.language = _read_lang(r)
    elif shape is PayloadShape.SUBTITLE:
        r.skip(1)  # character_code
        record.language = _read_lang(r)
    # PayloadShape.NONE: nothing beyond the coding type
    return record


def parse_stream_record(r: BinaryReader, streams: dict[int, StreamRecord]) -> StreamRecord | None:
    """Parse one stream_entry + stream_attributes pair into *streams*.

    Returns the new record, or ``None`` when its PID is already known for
    this playlist (the attributes are skipped, not re-decoded).  The reader
    always ends at the declared end of the attribute block, whatever the
    payload held.
    """
    pid = _parse_stream_entry(r)

    attr_len = r.u8()
    attr_start = r.tell()
    if pid in streams:
        log.debug("PID 0x%04X already known, skipping attributes", pid)
        r.seek(attr_start + attr_len)
        return None

    record = _parse_stream_attrs(r, pid)
    streams[pid] = record
    r.seek(attr_start + attr_len)
    return record


def _skip_extra_attrs(r: BinaryReader) -> None:
    """Skip a variable-length extra-attribute block, padded to 2 bytes."""
    extra_len = r.u8()
    r.skip(1)  # reserved
    r.skip(extra_len + (extra_len & 1))


def parse_stn_table(r: BinaryReader, streams: dict[int, StreamRecord]) -> list[StreamRecord]:
    """Parse the STN_table at the current position.

    Records are merged into *streams* keyed by PID; the list of records
    added by this table is returned.
    """
    r.skip(4)  # length + reserved

    num_video = r.u8()
    num_audio = r.u8()
    num_pg = r.u8()
    num_ig = r.u8()
    num_secondary_audio = r.u8()
    num_secondary_video = r.u8()
    num_pip_pg = r.u8()
    r.skip(5)  # reserved

    log.debug(
        "STN_table: video=%d audio=%d pg=%d ig=%d sec_audio=%d sec_video=%d pip_pg=%d",
        num_video,
        num_audio,
        num_pg,
        num_ig,
        num_secondary_audio,
        num_secondary_video,
        num_pip_pg,
    )

    added: list[StreamRecord] = []

    def _entry() -> None:
        record = parse_stream_record(r, streams)
        if record is not None:
            added.append(record)

    for _ in range(num_video):
        _entry()
    for _ in range(num_audio):
        _entry()
    for _ in range(num_pg + num_pip_pg):
        _entry()
    for _ in range(num_ig):
        _entry()
    for _ in range(num_secondary_audio):
        _entry()
        _skip_extra_attrs(r)  # secondary audio extras
    for _ in range(num_secondary_video):
        _entry()
        _skip_extra_attrs(r)  # secondary video extras
        _skip_extra_attrs(r)  # PiP PG extras

    return added
