"""Integration tests for the disc scan."""

import logging
from pathlib import Path

import pytest

from bdscan.config import ScanOptions
from bdscan.errors import NotADiscError
from bdscan.model import DiscScan, Playlist
from bdscan.scan import find_playlists, resolve_bdmv, scan_disc, sort_playlists, validate_bdmv
from builders import build_disc, simple_mpls


@pytest.fixture
def scan(synthetic_disc: Path) -> DiscScan:
    return scan_disc(synthetic_disc)


class TestOrdering:
    def test_sort_playlists_descending(self) -> None:
        playlists = [
            Playlist("a.mpls", duration=5),
            Playlist("b.mpls", duration=20),
            Playlist("c.mpls", duration=7),
        ]
        assert [pl.duration for pl in sort_playlists(playlists)] == [20, 7, 5]

    def test_sort_is_stable(self) -> None:
        playlists = [Playlist("a.mpls", duration=5), Playlist("b.mpls", duration=5)]
        assert [pl.source_file_name for pl in sort_playlists(playlists)] == ["a.mpls", "b.mpls"]

    def test_scan_longest_first(self, scan: DiscScan) -> None:
        assert [pl.source_file_name for pl in scan.playlists] == [
            "00001.mpls",
            "00002.mpls",
            "00000.mpls",
        ]
        assert [pl.duration_ms for pl in scan.playlists] == [20_000, 7_000, 5_000]


class TestFailures:
    def test_failures_recorded(self, scan: DiscScan) -> None:
        failed = {f.file_name: f.error for f in scan.failures}
        assert failed == {
            "00003.mpls": "DuplicatePlaylistError",
            "00004.mpls": "ShortReadError",
        }

    def test_failures_logged(self, synthetic_disc: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="bdscan.scan"):
            scan_disc(synthetic_disc)
        assert "Skipping 00004.mpls" in caplog.text

    def test_keep_duplicates(self, synthetic_disc: Path) -> None:
        result = scan_disc(synthetic_disc, ScanOptions(skip_duplicates=False))
        names = [pl.source_file_name for pl in result.playlists]
        assert names[:2] == ["00001.mpls", "00003.mpls"]
        assert result.playlists[0] == result.playlists[1]

    def test_missing_clip_only_fails_that_playlist(self, synthetic_disc: Path) -> None:
        (synthetic_disc / "STREAM" / "00004.M2TS").unlink()
        result = scan_disc(synthetic_disc)
        assert "00002.mpls" not in [pl.source_file_name for pl in result.playlists]
        assert "MissingClipError" in [f.error for f in result.failures]

    def test_clip_check_disabled(self, synthetic_disc: Path) -> None:
        (synthetic_disc / "STREAM" / "00004.M2TS").unlink()
        result = scan_disc(synthetic_disc, ScanOptions(check_clip_files=False))
        assert len(result.playlists) == 3

    def test_injected_clip_check(self, synthetic_disc: Path) -> None:
        result = scan_disc(synthetic_disc, clip_exists=lambda p: p.stem != "00001")
        assert [pl.source_file_name for pl in result.playlists] == ["00001.mpls", "00002.mpls"]


class TestDiscValidation:
    def test_not_a_directory(self, tmp_path: Path) -> None:
        with pytest.raises(NotADiscError, match="not a directory"):
            scan_disc(tmp_path / "missing")

    def test_no_playlist_dir(self, tmp_path: Path) -> None:
        with pytest.raises(NotADiscError, match="Cannot find BDMV"):
            scan_disc(tmp_path)

    def test_resolve_parent_and_bdmv(self, synthetic_disc: Path) -> None:
        assert resolve_bdmv(synthetic_disc.parent) == synthetic_disc.resolve()
        assert resolve_bdmv(synthetic_disc) == synthetic_disc.resolve()

    @pytest.mark.parametrize("entry", ["index.bdmv", "CLIPINF", "STREAM"])
    def test_required_entries(self, synthetic_disc: Path, entry: str) -> None:
        target = synthetic_disc / entry
        if target.is_dir():
            for child in target.iterdir():
                child.unlink()
            target.rmdir()
        else:
            target.unlink()
        with pytest.raises(NotADiscError, match=entry):
            validate_bdmv(synthetic_disc)

    def test_no_valid_playlists(self, tmp_path: Path) -> None:
        bdmv = build_disc(tmp_path, {"00000.mpls": b"garbage"})
        with pytest.raises(NotADiscError, match="No valid playlist"):
            scan_disc(bdmv)

    def test_empty_playlist_dir(self, tmp_path: Path) -> None:
        bdmv = build_disc(tmp_path, {})
        with pytest.raises(NotADiscError):
            scan_disc(bdmv)

    def test_find_playlists_filters(self, tmp_path: Path) -> None:
        bdmv = build_disc(
            tmp_path,
            {"00002.mpls": b"", "00001.MPLS": b"", "readme.txt": b""},
        )
        (bdmv / "PLAYLIST" / "BACKUP.mpls").mkdir()
        assert [p.name for p in find_playlists(bdmv)] == ["00001.MPLS", "00002.mpls"]


class TestSinglePlaylistDisc:
    def test_one_playlist(self, tmp_path: Path) -> None:
        bdmv = build_disc(
            tmp_path, {"00800.mpls": simple_mpls([("00010", 60.0)])}, ["00010"]
        )
        result = scan_disc(bdmv)
        assert result.path == str(bdmv.resolve())
        assert len(result.playlists) == 1
        assert result.failures == []
        assert result.playlists[0].items[0].clip_file_name.endswith("00010.M2TS")


class TestRealDisc:
    def test_real_disc_invariants(self, bdmv_path: Path) -> None:
        """Duration, start-time and PID invariants on a real disc."""
        result = scan_disc(bdmv_path)
        assert result.playlists
        durations = [pl.duration for pl in result.playlists]
        assert durations == sorted(durations, reverse=True)
        for pl in result.playlists:
            assert pl.duration == sum(item.duration for item in pl.items)
            assert len({s.pid for s in pl.streams.values()}) == len(pl.streams)
