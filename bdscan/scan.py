"""Disc-level scan: validate the BDMV tree and decode every playlist."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from bdscan.bdmv.mpls import ClipExists, parse_mpls
from bdscan.config import ScanOptions
from bdscan.errors import BDScanError, NotADiscError
from bdscan.model import DiscScan, Playlist, ScanFailure

log = logging.getLogger(__name__)

REQUIRED_ENTRIES = ("index.bdmv", "CLIPINF", "PLAYLIST", "STREAM")


def resolve_bdmv(path: Union[str, Path]) -> Path:
    """Resolve *path* to the actual BDMV directory.

    Accepts the BDMV directory itself (contains ``PLAYLIST/``) or a parent
    directory holding ``BDMV/``.
    """
    p = Path(path).resolve()
    if not p.is_dir():
        raise NotADiscError(f"{p} is not a directory")
    if (p / "PLAYLIST").is_dir():
        return p
    bdmv_sub = p / "BDMV"
    if bdmv_sub.is_dir() and (bdmv_sub / "PLAYLIST").is_dir():
        return bdmv_sub
    raise NotADiscError(
        f"Cannot find BDMV structure at {p}: expected a directory containing "
        "PLAYLIST/ (or a parent with BDMV/PLAYLIST/)"
    )


def validate_bdmv(bdmv: Path) -> None:
    """Raise :class:`NotADiscError` unless every required entry exists."""
    missing = [name for name in REQUIRED_ENTRIES if not (bdmv / name).exists()]
    if missing:
        raise NotADiscError(f"{bdmv} is missing {', '.join(missing)}")


def find_playlists(bdmv: Path) -> list[Path]:
    """Return the ``*.mpls`` files under ``PLAYLIST/``, sorted by filename."""
    return sorted(
        p for p in (bdmv / "PLAYLIST").iterdir() if p.is_file() and p.suffix.lower() == ".mpls"
    )


def sort_playlists(playlists: list[Playlist]) -> list[Playlist]:
    """Order playlists longest first; ties keep their input order."""
    return sorted(playlists, key=lambda pl: pl.duration, reverse=True)


def scan_disc(
    path: Union[str, Path],
    options: ScanOptions | None = None,
    *,
    clip_exists: ClipExists | None = None,
) -> DiscScan:
    """Decode every playlist of the disc at *path*.

    Files that fail to decode are logged and recorded in
    :attr:`DiscScan.failures`; the scan only fails as a whole when no
    playlist decodes.
    """
    options = options or ScanOptions()
    bdmv = resolve_bdmv(path)
    validate_bdmv(bdmv)

    accepted: list[Playlist] = []
    failures: list[ScanFailure] = []
    for mpls in find_playlists(bdmv):
        try:
            playlist = parse_mpls(
                mpls, bdmv, options=options, accepted=accepted, clip_exists=clip_exists
            )
        except BDScanError as e:
            log.warning("Skipping %s: %s", mpls.name, e)
            failures.append(ScanFailure(mpls.name, type(e).__name__, str(e)))
            continue
        log.info(
            "Parsed %s: %d item(s), %d stream(s)",
            mpls.name,
            len(playlist.items),
            len(playlist.streams),
        )
        accepted.append(playlist)

    if not accepted:
        raise NotADiscError(f"No valid playlist found in {bdmv / 'PLAYLIST'}")

    return DiscScan(path=str(bdmv), playlists=sort_playlists(accepted), failures=failures)
