"""Scan configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

ENV_CHECK_CLIPS = "BDSCAN_CHECK_CLIPS"
ENV_SKIP_DUPLICATES = "BDSCAN_SKIP_DUPLICATES"

_FALSE = {"0", "false", "no", "off"}


def _env_flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    value = env.get(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() not in _FALSE


@dataclass(slots=True, frozen=True)
class ScanOptions:
    """Policies that differ between players and tools.

    ``check_clip_files``: reject a playlist whose play items reference an
    ``.M2TS`` file missing from ``STREAM/``.
    ``skip_duplicates``: reject a playlist structurally identical to one
    already accepted for the disc.
    """

    check_clip_files: bool = True
    skip_duplicates: bool = True

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> ScanOptions:
        env = os.environ if env is None else env
        return cls(
            check_clip_files=_env_flag(env, ENV_CHECK_CLIPS, True),
            skip_duplicates=_env_flag(env, ENV_SKIP_DUPLICATES, True),
        )
