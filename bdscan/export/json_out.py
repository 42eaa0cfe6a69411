"""JSON export for disc scan results."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from bdscan.model import DiscScan, Playlist, StreamFormat, StreamRecord


def _stream_to_dict(s: StreamRecord) -> dict:
    entry: dict = {
        "pid": s.pid,
        "type": s.kind.name,
        "coding_type": s.coding_type,
        "format": s.format.value,
        "language": s.language,
    }
    if s.format is StreamFormat.VIDEO:
        entry["video_format"] = s.video_format.name
        entry["frame_rate"] = s.frame_rate.name
        entry["aspect_ratio"] = s.aspect_ratio.name
    elif s.format is StreamFormat.AUDIO:
        entry["channel_layout"] = s.channel_layout.name
        entry["sample_rate"] = s.sample_rate.name
    return entry


def playlist_to_dict(pl: Playlist) -> dict:
    return {
        "mpls": pl.source_file_name,
        "duration": pl.duration,
        "duration_ms": pl.duration_ms,
        "items": [
            {
                "clip_id": item.clip_id,
                "file_name": item.clip_file_name,
                "start_pts": item.start_pts,
                "end_pts": item.end_pts,
                "start_time": item.start_time,
                "multi_angle": item.is_multi_angle,
                "angle_count": item.angle_count,
            }
            for item in pl.items
        ],
        "streams": [_stream_to_dict(s) for s in pl.streams.values()],
    }


def scan_to_dict(scan: DiscScan) -> dict:
    """Convert a DiscScan to a JSON-serializable dict."""
    return {
        "schema_version": "bdscan.disc.v1",
        "disc": {
            "path": scan.path,
            "generated_at": datetime.now(timezone.utc).isoformat(),
        },
        "playlists": [playlist_to_dict(pl) for pl in scan.playlists],
        "failures": [
            {"mpls": f.file_name, "error": f.error, "message": f.message} for f in scan.failures
        ],
    }


def export_json(scan: DiscScan, path: str | Path | None = None, pretty: bool = True) -> str:
    """Export a scan to JSON. If path given, write to file. Always returns JSON string."""
    data = scan_to_dict(scan)
    indent = 2 if pretty else None
    text = json.dumps(data, indent=indent, default=str)
    if path is not None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
    return text
