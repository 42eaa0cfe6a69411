"""Exception hierarchy for playlist decoding and disc scanning."""

from __future__ import annotations


class BDScanError(ValueError):
    """Base class for every error raised while decoding a disc."""


# -- I/O --


class ReaderError(BDScanError):
    """The underlying binary source could not satisfy a read or seek."""


class ShortReadError(ReaderError):
    pass


class ReaderOpenError(ReaderError):
    pass


# -- format --


class FormatError(BDScanError):
    """The data does not follow the expected binary layout."""


# -- referential --


class MissingClipError(BDScanError):
    """A play item references a clip file that is not on disc."""

    def __init__(self, clip_path: str) -> None:
        super().__init__(f"referenced clip file does not exist: {clip_path}")
        self.clip_path = clip_path


# -- semantic integrity --


class IntegrityError(BDScanError):
    """A structurally valid playlist that must still be rejected."""


class DuplicateClipError(IntegrityError):
    def __init__(self, clip_path: str) -> None:
        super().__init__(f"clip referenced twice in one playlist: {clip_path}")
        self.clip_path = clip_path


class ZeroDurationError(IntegrityError):
    pass


class DuplicatePlaylistError(IntegrityError):
    def __init__(self, duplicate_of: str) -> None:
        super().__init__(f"structural duplicate of {duplicate_of}")
        self.duplicate_of = duplicate_of


# -- disc level --


class NotADiscError(BDScanError):
    """The directory is not a valid or parseable BDMV structure."""
