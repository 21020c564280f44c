from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Policy for one run, built once at startup and passed explicitly."""

    cutoff: Optional[datetime] = None
    labels: Tuple[str, ...] = ()
    prefix: str = ""
    aggregate: bool = False
    dry_run: bool = False
    title_exclude_filter: Optional[str] = None
    title_include_filter: Optional[str] = None
    content_exclude_filter: Optional[str] = None
    character_limit: Optional[int] = None
    # Raw ``characterLimit`` input that failed to parse; every entry is
    # skipped while this is set.
    invalid_character_limit: Optional[str] = None


@dataclass(frozen=True, slots=True)
class RunSettings:
    """Process-boundary values that are not pipeline policy."""

    feed_url: str
    repository: str
    token: str
    api_url: Optional[str] = None
    timeout: int = 30
