import os
from pathlib import Path

import pytest

from bdscan.config import ScanOptions
from builders import build_disc, simple_mpls


@pytest.fixture
def bdmv_path() -> Path:
    """Path to a real BDMV directory for integration tests.

    Uses the BDSCAN_TEST_BDMV env var; skipped when it is not set.
    """
    env: str | None = os.environ.get("BDSCAN_TEST_BDMV")
    if not env:
        pytest.skip("BDSCAN_TEST_BDMV not set")
    p = Path(env)
    # Accept a parent dir that contains BDMV/
    if (p / "BDMV" / "PLAYLIST").is_dir():
        p = p / "BDMV"
    if not (p / "PLAYLIST").is_dir():
        pytest.skip(f"No PLAYLIST/ found at {p}")
    return p


@pytest.fixture
def no_clip_check() -> ScanOptions:
    """Options for byte-level tests that have no STREAM/ directory."""
    return ScanOptions(check_clip_files=False)



@pytest.fixture
def synthetic_disc(tmp_path: Path) -> Path:
    """A disc with three valid playlists (5 s, 20 s, 7 s), a structural
    duplicate of the 20 s one, and a corrupt file."""
    return build_disc(
        tmp_path / "disc",
        {
            "00000.mpls": simple_mpls([("00001", 5.0)]),
            "00001.mpls": simple_mpls([("00002", 12.0), ("00003", 8.0)]),
            "00002.mpls": simple_mpls([("00004", 7.0)]),
            "00003.mpls": simple_mpls([("00002", 12.0), ("00003", 8.0)]),
            "00004.mpls": b"MPLS0300\x00\x00",
        },
        ["00001", "00002", "00003", "00004"],
    )
