"""Text report for terminal display."""

from __future__ import annotations

from bdscan.model import (
    DiscScan,
    FrameRate,
    Playlist,
    StreamFormat,
    StreamRecord,
    StreamType,
    VideoFormat,
    pts_to_ms,
)

_CODEC_NAME: dict[StreamType, str] = {
    StreamType.MPEG1_VIDEO: "MPEG-1 Video",
    StreamType.MPEG2_VIDEO: "MPEG-2 Video",
    StreamType.H264_VIDEO: "H.264/AVC",
    StreamType.H264_MVC_VIDEO: "H.264/MVC",
    StreamType.HEVC_VIDEO: "HEVC",
    StreamType.VC1_VIDEO: "VC-1",
    StreamType.MPEG1_AUDIO: "MPEG-1 Audio",
    StreamType.MPEG2_AUDIO: "MPEG-2 Audio",
    StreamType.MPEG2_AAC_AUDIO: "MPEG-2 AAC",
    StreamType.MPEG4_AAC_AUDIO: "MPEG-4 AAC",
    StreamType.LPCM_AUDIO: "LPCM",
    StreamType.AC3_AUDIO: "AC-3",
    StreamType.DTS_AUDIO: "DTS",
    StreamType.AC3_TRUE_HD_AUDIO: "TrueHD",
    StreamType.AC3_PLUS_AUDIO: "AC-3+",
    StreamType.DTS_HD_AUDIO: "DTS-HD HR",
    StreamType.DTS_HD_MASTER_AUDIO: "DTS-HD MA",
    StreamType.AC3_PLUS_SECONDARY_AUDIO: "DD+ secondary",
    StreamType.DTS_HD_SECONDARY_AUDIO: "DTS-HD secondary",
    StreamType.PRESENTATION_GRAPHICS: "PGS",
    StreamType.INTERACTIVE_GRAPHICS: "IG",
    StreamType.SUBTITLE: "Text subtitle",
}

_VIDEO_FORMAT: dict[VideoFormat, str] = {
    VideoFormat.VIDEO_480I: "480i",
    VideoFormat.VIDEO_576I: "576i",
    VideoFormat.VIDEO_480P: "480p",
    VideoFormat.VIDEO_1080I: "1080i",
    VideoFormat.VIDEO_720P: "720p",
    VideoFormat.VIDEO_1080P: "1080p",
    VideoFormat.VIDEO_576P: "576p",
    VideoFormat.VIDEO_2160P: "2160p",
}

_FRAME_RATE: dict[FrameRate, str] = {
    FrameRate.FPS_23_976: "23.976",
    FrameRate.FPS_24: "24",
    FrameRate.FPS_25: "25",
    FrameRate.FPS_29_97: "29.97",
    FrameRate.FPS_50: "50",
    FrameRate.FPS_59_94: "59.94",
}

_FORMAT_NAME: dict[StreamFormat, str] = {
    StreamFormat.VIDEO: "Video",
    StreamFormat.AUDIO: "Audio",
    StreamFormat.SUBTITLES: "Subtitles",
}


def format_pts(pts: int) -> str:
    """Format a 100 ns timestamp as HH:MM:SS.mmm."""
    ms = pts_to_ms(pts)
    hours = ms // 3_600_000
    minutes = (ms // 60_000) % 60
    seconds = (ms // 1000) % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{ms % 1000:03d}"


def codec_label(stream: StreamRecord) -> str:
    return _CODEC_NAME.get(stream.kind, f"0x{stream.coding_type:02X}")


def video_format_label(fmt: VideoFormat) -> str:
    return _VIDEO_FORMAT.get(fmt, "Unknown")


def frame_rate_label(rate: FrameRate) -> str:
    return _FRAME_RATE.get(rate, "Unknown")


def stream_line(stream: StreamRecord) -> str:
    """One-line description, e.g. ``PID : 4113, type : H.264/AVC (Video 1080p@23.976)``."""
    fmt = stream.format
    detail = _FORMAT_NAME[fmt]
    if fmt is StreamFormat.VIDEO:
        detail += (
            f" {video_format_label(stream.video_format)}@{frame_rate_label(stream.frame_rate)}"
        )
    line = f"PID : {stream.pid}, type : {codec_label(stream)} ({detail})"
    if stream.language:
        line += f", language : {stream.language}"
    return line


def playlist_report(pl: Playlist) -> list[str]:
    lines = [f"Playlist : {pl.source_file_name}, duration : {format_pts(pl.duration)}"]
    lines.append("    List of files:")
    for item in pl.items:
        lines.append(f"        Filename : {item.clip_file_name}")
    lines.append("    List of streams:")
    for stream in pl.streams.values():
        lines.append(f"        {stream_line(stream)}")
    return lines


def text_report(scan: DiscScan) -> str:
    """Generate a plain text summary report."""
    lines: list[str] = []

    lines.append("=" * 60)
    lines.append("Disc Summary")
    lines.append("=" * 60)
    lines.append(f"  Path:       {scan.path}")
    lines.append(f"  Playlists:  {len(scan.playlists)}")
    lines.append(f"  Skipped:    {len(scan.failures)}")
    lines.append("")

    for pl in scan.playlists:
        lines.extend(playlist_report(pl))
        lines.append("")

    if scan.failures:
        lines.append("-" * 60)
        lines.append("Skipped playlists")
        lines.append("-" * 60)
        for f in scan.failures:
            lines.append(f"  {f.file_name:<16} [{f.error}] {f.message}")
        lines.append("")

    return "\n".join(lines)
