from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum

PTS_PER_SECOND = 10_000_000
TICKS_PER_SECOND = 45_000


def ticks_to_pts(ticks: int) -> int:
    """Convert 45 kHz ticks to 100 ns units, truncating."""
    return ticks * PTS_PER_SECOND // TICKS_PER_SECOND


def pts_to_ms(pts: int) -> int:
    return pts // 10_000


def pts_to_seconds(pts: int) -> float:
    return pts / PTS_PER_SECOND


class _CodedEnum(IntEnum):
    """IntEnum whose unnamed on-disc codes collapse to ``UNKNOWN``."""

    @classmethod
    def decode(cls, value: int):
        try:
            return cls(value)
        except ValueError:
            return cls(0)


class PayloadShape(Enum):
    """Layout of the attribute payload that follows a coding-type tag."""

    VIDEO = "video"
    AUDIO = "audio"
    GRAPHICS = "graphics"
    SUBTITLE = "subtitle"
    NONE = "none"


class StreamType(_CodedEnum):
    UNKNOWN = 0x00
    MPEG1_VIDEO = 0x01
    MPEG2_VIDEO = 0x02
    H264_VIDEO = 0x1B
    H264_MVC_VIDEO = 0x20
    HEVC_VIDEO = 0x24
    VC1_VIDEO = 0xEA
    MPEG1_AUDIO = 0x03
    MPEG2_AUDIO = 0x04
    MPEG2_AAC_AUDIO = 0x0F
    MPEG4_AAC_AUDIO = 0x11
    LPCM_AUDIO = 0x80
    AC3_AUDIO = 0x81
    DTS_AUDIO = 0x82
    AC3_TRUE_HD_AUDIO = 0x83
    AC3_PLUS_AUDIO = 0x84
    DTS_HD_AUDIO = 0x85
    DTS_HD_MASTER_AUDIO = 0x86
    AC3_PLUS_SECONDARY_AUDIO = 0xA1
    DTS_HD_SECONDARY_AUDIO = 0xA2
    PRESENTATION_GRAPHICS = 0x90
    INTERACTIVE_GRAPHICS = 0x91
    SUBTITLE = 0x92

    @property
    def shape(self) -> PayloadShape:
        return _SHAPES.get(self, PayloadShape.NONE)


_SHAPES: dict[StreamType, PayloadShape] = {
    StreamType.MPEG1_VIDEO: PayloadShape.VIDEO,
    StreamType.MPEG2_VIDEO: PayloadShape.VIDEO,
    StreamType.H264_VIDEO: PayloadShape.VIDEO,
    StreamType.H264_MVC_VIDEO: PayloadShape.VIDEO,
    StreamType.HEVC_VIDEO: PayloadShape.VIDEO,
    StreamType.VC1_VIDEO: PayloadShape.VIDEO,
    StreamType.MPEG1_AUDIO: PayloadShape.AUDIO,
    StreamType.MPEG2_AUDIO: PayloadShape.AUDIO,
    StreamType.LPCM_AUDIO: PayloadShape.AUDIO,
    StreamType.AC3_AUDIO: PayloadShape.AUDIO,
    StreamType.DTS_AUDIO: PayloadShape.AUDIO,
    StreamType.AC3_TRUE_HD_AUDIO: PayloadShape.AUDIO,
    StreamType.AC3_PLUS_AUDIO: PayloadShape.AUDIO,
    StreamType.DTS_HD_AUDIO: PayloadShape.AUDIO,
    StreamType.DTS_HD_MASTER_AUDIO: PayloadShape.AUDIO,
    StreamType.AC3_PLUS_SECONDARY_AUDIO: PayloadShape.AUDIO,
    StreamType.DTS_HD_SECONDARY_AUDIO: PayloadShape.AUDIO,
    StreamType.PRESENTATION_GRAPHICS: PayloadShape.GRAPHICS,
    StreamType.INTERACTIVE_GRAPHICS: PayloadShape.GRAPHICS,
    StreamType.SUBTITLE: PayloadShape.SUBTITLE,
}


class VideoFormat(_CodedEnum):
    UNKNOWN = 0
    VIDEO_480I = 1
    VIDEO_576I = 2
    VIDEO_480P = 3
    VIDEO_1080I = 4
    VIDEO_720P = 5
    VIDEO_1080P = 6
    VIDEO_576P = 7
    VIDEO_2160P = 8


class FrameRate(_CodedEnum):
    UNKNOWN = 0
    FPS_23_976 = 1
    FPS_24 = 2
    FPS_25 = 3
    FPS_29_97 = 4
    FPS_50 = 6
    FPS_59_94 = 7


class AspectRatio(_CodedEnum):
    UNKNOWN = 0
    RATIO_4_3 = 2
    RATIO_16_9 = 3
    RATIO_2_21 = 4


class ChannelLayout(_CodedEnum):
    UNKNOWN = 0
    MONO = 1
    STEREO = 3
    MULTI = 6
    COMBO = 12


class SampleRate(_CodedEnum):
    UNKNOWN = 0
    KHZ_48 = 1
    KHZ_96 = 4
    KHZ_192 = 5
    KHZ_48_192 = 12
    KHZ_48_96 = 14


class StreamFormat(Enum):
    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLES = "subtitles"


@dataclass(slots=True)
class StreamRecord:
    pid: int
    kind: StreamType
    coding_type: int
    language: str | None = None
    # video only
    video_format: VideoFormat = VideoFormat.UNKNOWN
    frame_rate: FrameRate = FrameRate.UNKNOWN
    aspect_ratio: AspectRatio = AspectRatio.UNKNOWN
    # audio only
    channel_layout: ChannelLayout = ChannelLayout.UNKNOWN
    sample_rate: SampleRate = SampleRate.UNKNOWN

    @property
    def format(self) -> StreamFormat:
        if self.video_format is not VideoFormat.UNKNOWN:
            return StreamFormat.VIDEO
        if self.channel_layout is not ChannelLayout.UNKNOWN:
            return StreamFormat.AUDIO
        return StreamFormat.SUBTITLES


@dataclass(slots=True)
class PlaylistItem:
    clip_file_name: str
    start_pts: int
    end_pts: int
    start_time: int
    clip_id: str = field(default="", compare=False)
    is_multi_angle: bool = field(default=False, compare=False)
    angle_count: int = field(default=1, compare=False)

    @property
    def duration(self) -> int:
        return self.end_pts - self.start_pts

    @property
    def duration_ms(self) -> int:
        return pts_to_ms(self.duration)


@dataclass(slots=True, eq=False)
class Playlist:
    source_file_name: str
    duration: int = 0
    items: list[PlaylistItem] = field(default_factory=list)
    streams: dict[int, StreamRecord] = field(default_factory=dict)

    def structurally_equal(self, other: Playlist) -> bool:
        """Compare everything except the source file name."""
        return (
            self.duration == other.duration
            and self.items == other.items
            and self.streams == other.streams
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Playlist):
            return NotImplemented
        return self.structurally_equal(other)

    @property
    def duration_ms(self) -> int:
        return pts_to_ms(self.duration)

    @property
    def duration_seconds(self) -> float:
        return pts_to_seconds(self.duration)

    @property
    def clip_ids(self) -> list[str]:
        return [item.clip_id for item in self.items]

    def streams_by_format(self, fmt: StreamFormat) -> list[StreamRecord]:
        return [s for s in self.streams.values() if s.format is fmt]


@dataclass(slots=True)
class ScanFailure:
    """A playlist file that did not decode, and why."""

    file_name: str
    error: str
    message: str


@dataclass(slots=True)
class DiscScan:
    path: str
    playlists: list[Playlist]
    failures: list[ScanFailure] = field(default_factory=list)
