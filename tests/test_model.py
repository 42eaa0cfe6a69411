"""Tests for the data model helpers."""

from bdscan.model import (
    ChannelLayout,
    PayloadShape,
    Playlist,
    PlaylistItem,
    StreamFormat,
    StreamRecord,
    StreamType,
    VideoFormat,
    pts_to_ms,
    ticks_to_pts,
)


def test_ticks_to_pts() -> None:
    assert ticks_to_pts(45_000) == 10_000_000
    assert ticks_to_pts(0xFFFFFFFF) == 0xFFFFFFFF * 2000 // 9


def test_pts_to_ms() -> None:
    assert pts_to_ms(10_000_000) == 1000
    assert pts_to_ms(9_999) == 0


def test_shapes_cover_every_type() -> None:
    assert StreamType.HEVC_VIDEO.shape is PayloadShape.VIDEO
    assert StreamType.AC3_TRUE_HD_AUDIO.shape is PayloadShape.AUDIO
    assert StreamType.INTERACTIVE_GRAPHICS.shape is PayloadShape.GRAPHICS
    assert StreamType.SUBTITLE.shape is PayloadShape.SUBTITLE
    assert StreamType.MPEG2_AAC_AUDIO.shape is PayloadShape.NONE
    assert StreamType.UNKNOWN.shape is PayloadShape.NONE


def test_decode_unnamed_value() -> None:
    assert StreamType.decode(0x55) is StreamType.UNKNOWN
    assert ChannelLayout.decode(12) is ChannelLayout.COMBO


def test_stream_format_classification() -> None:
    video = StreamRecord(0x1011, StreamType.H264_VIDEO, 0x1B, video_format=VideoFormat.VIDEO_720P)
    audio = StreamRecord(0x1100, StreamType.AC3_AUDIO, 0x81, channel_layout=ChannelLayout.STEREO)
    pgs = StreamRecord(0x1200, StreamType.PRESENTATION_GRAPHICS, 0x90, language="eng")
    assert video.format is StreamFormat.VIDEO
    assert audio.format is StreamFormat.AUDIO
    assert pgs.format is StreamFormat.SUBTITLES


def test_playlist_equality_ignores_file_name() -> None:
    item = PlaylistItem("/d/STREAM/00001.M2TS", 0, 100, 0, clip_id="00001")
    a = Playlist("00001.mpls", 100, [item], {})
    b = Playlist("00002.mpls", 100, [PlaylistItem("/d/STREAM/00001.M2TS", 0, 100, 0)], {})
    assert a == b
    assert a.structurally_equal(b)
    b.duration = 101
    assert a != b


def test_item_equality_ignores_angle_info() -> None:
    a = PlaylistItem("x", 0, 10, 0, is_multi_angle=True, angle_count=2)
    b = PlaylistItem("x", 0, 10, 0)
    assert a == b
    assert a != PlaylistItem("x", 0, 10, 5)
