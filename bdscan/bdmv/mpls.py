"""Parser for Blu-ray MPLS (Movie PlayList) files."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Union

from bdscan.bdmv.reader import BinaryReader, open_reader
from bdscan.bdmv.streams import parse_stn_table
from bdscan.config import ScanOptions
from bdscan.errors import (
    DuplicateClipError,
    DuplicatePlaylistError,
    FormatError,
    MissingClipError,
    ZeroDurationError,
)
from bdscan.model import Playlist, PlaylistItem, ticks_to_pts

log = logging.getLogger(__name__)

MPLS_MAGIC = "MPLS"
MPLS_VERSIONS = frozenset({"0100", "0200", "0300"})

# PlayList() header: length(4) + reserved(2) + number_of_PlayItems(2)
# + number_of_SubPaths(2)
_PLAYLIST_HEADER_LEN = 10

ClipExists = Callable[[Path], bool]


def _default_clip_exists(path: Path) -> bool:
    return path.is_file()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _parse_play_item(
    r: BinaryReader,
    playlist: Playlist,
    root: Path,
    seen_clips: set[str],
    options: ScanOptions,
    clip_exists: ClipExists,
) -> PlaylistItem:
    """Parse a single PlayItem into *playlist* (duration and streams)."""
    raw_name = r.read_bytes(9)
    if raw_name[5:] != b"M2TS":
        raise FormatError(f"PlayItem codec identifier {raw_name[5:]!r} is not b'M2TS'")
    clip_id = raw_name[:5].decode("ascii", "replace")

    clip_path = root / "STREAM" / f"{clip_id}.M2TS"
    clip_file_name = str(clip_path)
    if options.check_clip_files and not clip_exists(clip_path):
        raise MissingClipError(clip_file_name)
    if clip_file_name in seen_clips:
        raise DuplicateClipError(clip_file_name)
    seen_clips.add(clip_file_name)

    flags = r.read_bytes(3)  # reserved + is_multi_angle + connection_condition, ref_to_STC_id
    is_multi_angle = bool((flags[1] >> 4) & 1)

    start_pts = ticks_to_pts(r.u32())
    end_pts = ticks_to_pts(r.u32())
    item = PlaylistItem(
        clip_file_name=clip_file_name,
        start_pts=start_pts,
        end_pts=end_pts,
        start_time=playlist.duration,
        clip_id=clip_id,
        is_multi_angle=is_multi_angle,
    )
    playlist.duration += end_pts - start_pts

    r.skip(8)  # UO_mask_table
    r.skip(1)  # PlayItem_random_access_flag + reserved
    r.skip(1)  # still_mode
    r.skip(2)  # still_time / reserved

    if is_multi_angle:
        item.angle_count = max(r.u8(), 1)
        r.skip(1)  # is_different_audios + is_seamless_angle_change
        r.skip(10 * (item.angle_count - 1))  # clip_name(5) + codec_id(4) + STC_id(1)

    parse_stn_table(r, playlist.streams)
    return item


def _parse_play_list(
    r: BinaryReader,
    playlist: Playlist,
    playlist_start: int,
    root: Path,
    options: ScanOptions,
    clip_exists: ClipExists,
) -> None:
    """Parse the PlayList section at *playlist_start* into *playlist*."""
    r.seek(playlist_start)
    r.skip(4)  # section length
    r.skip(2)  # reserved
    num_items = r.u16()

    seen_clips: set[str] = set()
    item_offset = playlist_start + _PLAYLIST_HEADER_LEN
    for _ in range(num_items):
        r.seek(item_offset)
        # the length field does not count itself
        item_offset += r.u16() + 2
        item = _parse_play_item(r, playlist, root, seen_clips, options, clip_exists)
        playlist.items.append(item)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_mpls(
    source: Union[BinaryReader, bytes, str, Path],
    root: Union[str, Path, None] = None,
    *,
    options: ScanOptions | None = None,
    accepted: Iterable[Playlist] = (),
    clip_exists: ClipExists | None = None,
) -> Playlist:
    """Parse an MPLS file and return a :class:`Playlist` object.

    *root* is the BDMV directory that clip paths are composed against; for
    a file source it defaults to the parent of ``PLAYLIST/``.  *accepted*
    holds the playlists already kept for this disc, used to reject
    structural duplicates when ``options.skip_duplicates`` is set.
    """
    options = options or ScanOptions()
    clip_exists = clip_exists or _default_clip_exists
    if isinstance(source, BinaryReader):
        return _parse_mpls_reader(
            source, "", Path(root or "."), options, accepted, clip_exists
        )
    if isinstance(source, bytes):
        name, root_path = "", Path(root or ".")
    else:
        path = Path(source)
        name = path.name
        root_path = Path(root) if root is not None else path.parent.parent
    with open_reader(source) as r:
        return _parse_mpls_reader(r, name, root_path, options, accepted, clip_exists)


def _parse_mpls_reader(
    r: BinaryReader,
    name: str,
    root: Path,
    options: ScanOptions,
    accepted: Iterable[Playlist],
    clip_exists: ClipExists,
) -> Playlist:
    magic = r.read_string(4)
    if magic != MPLS_MAGIC:
        raise FormatError(f"Not an MPLS file (magic={magic!r})")
    version = r.read_string(4)
    if version not in MPLS_VERSIONS:
        raise FormatError(f"Unsupported MPLS version {version!r}")

    playlist_start = r.u32()

    playlist = Playlist(source_file_name=name)
    _parse_play_list(r, playlist, playlist_start, root, options, clip_exists)

    # an item whose out time precedes its in time can drive the total negative
    if playlist.duration <= 0:
        raise ZeroDurationError(
            f"{name or 'playlist'} has no positive total duration ({playlist.duration})"
        )

    if options.skip_duplicates:
        for other in accepted:
            if playlist.structurally_equal(other):
                raise DuplicatePlaylistError(other.source_file_name)

    return playlist
