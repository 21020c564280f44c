from __future__ import annotations

import os
import re
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

import yaml

from .logging import get_logger
from .pipeline_config import PipelineConfig, RunSettings


logger = get_logger("f2i.config")


class ConfigError(Exception):
    """Raised when the run cannot be configured (fatal for the process)."""


LAST_TIME_INPUT = "lastTime"
LABELS_INPUT = "labels"
REPO_TOKEN_INPUT = "repo-token"
FEED_INPUT = "feed"
PREFIX_INPUT = "prefix"
AGGREGATE_INPUT = "aggregate"
DRY_RUN_INPUT = "dry-run"
TITLE_FILTER_INPUT = "titleFilter"
TITLE_INCLUSION_FILTER_INPUT = "titleInclusionFilter"
CONTENT_FILTER_INPUT = "contentFilter"
CHARACTER_LIMIT_INPUT = "characterLimit"

INPUT_NAMES: Tuple[str, ...] = (
    LAST_TIME_INPUT,
    LABELS_INPUT,
    REPO_TOKEN_INPUT,
    FEED_INPUT,
    PREFIX_INPUT,
    AGGREGATE_INPUT,
    DRY_RUN_INPUT,
    TITLE_FILTER_INPUT,
    TITLE_INCLUSION_FILTER_INPUT,
    CONTENT_FILTER_INPUT,
    CHARACTER_LIMIT_INPUT,
)

_TRUE_VALUES = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_VALUES = {"0", "f", "F", "FALSE", "false", "False"}

_DURATION_UNITS_NS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # micro sign
    "μs": 1_000,  # greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
# Largest duration representable as int64 nanoseconds (about 2562047h)
MAX_DURATION_NS = 2**63 - 1
_DURATION_PART = r"([0-9]+\.?[0-9]*|\.[0-9]+)(ns|us|µs|μs|ms|s|m|h)"
_duration_re = re.compile(rf"([+-]?)((?:{_DURATION_PART})+)")
_duration_part_re = re.compile(_DURATION_PART)
_integer_re = re.compile(r"[+-]?[0-9]+")


def get_input(name: str, env: Mapping[str, str] | None = None) -> str:
    """Read an action input the way the GitHub Actions runner exposes it."""
    env = os.environ if env is None else env
    key = "INPUT_" + name.replace(" ", "_").upper()
    return (env.get(key) or "").strip()


def parse_bool(value: str) -> bool:
    """Parse a boolean with the same accepted spellings as Go's strconv."""
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean: {value!r}")


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as ``24h``, ``1h30m`` or ``-90s``.

    Units: ns, us, ms, s, m, h. A bare ``0`` is accepted.
    """
    text = (value or "").strip()
    if text in ("0", "+0", "-0"):
        return timedelta(0)
    match = _duration_re.fullmatch(text)
    if not match:
        raise ValueError(f"invalid duration: {value!r}")
    total_ns = 0.0
    for number, unit in _duration_part_re.findall(match.group(2)):
        total_ns += float(number) * _DURATION_UNITS_NS[unit]
    if total_ns > MAX_DURATION_NS:
        raise ValueError(f"invalid duration: {value!r} is out of range")
    total = timedelta(microseconds=total_ns / 1000)
    return -total if match.group(1) == "-" else total


def parse_labels(value: str) -> Tuple[str, ...]:
    return tuple(label.strip() for label in (value or "").split(",") if label.strip())


def parse_repository(value: str | None) -> Tuple[str, str]:
    parts = (value or "").strip().split("/")
    if len(parts) != 2 or not all(parts):
        raise ConfigError(f"Repository must be in the form 'owner/name', got {value!r}")
    return parts[0], parts[1]


def load_inputs_file(path: Path | str) -> Dict[str, str]:
    """Load a YAML mapping of input name to value.

    Lets the tool run outside of Actions with the same input names the
    workflow file would use. Unknown keys are ignored with a warning.
    """
    inputs_path = Path(path)
    if not inputs_path.exists():
        raise ConfigError(f"Inputs file not found: {inputs_path}")

    with inputs_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigError("Inputs file must contain a mapping of input names to values")

    inputs: Dict[str, str] = {}
    for key, value in data.items():
        if key not in INPUT_NAMES:
            logger.warning("Ignoring unknown input '%s' in %s", key, inputs_path)
            continue
        if value is None:
            continue
        if isinstance(value, list):
            value = ",".join(str(v) for v in value)
        inputs[key] = str(value).strip()
    return inputs


def resolve_inputs(
    overrides: Mapping[str, Optional[str]] | None = None,
    env: Mapping[str, str] | None = None,
    file_inputs: Mapping[str, str] | None = None,
) -> Dict[str, str]:
    """Merge inputs: explicit overrides, then ``INPUT_*`` env, then file."""
    overrides = overrides or {}
    file_inputs = file_inputs or {}
    resolved: Dict[str, str] = {}
    for name in INPUT_NAMES:
        override = overrides.get(name)
        if override is not None:
            resolved[name] = override.strip()
            continue
        resolved[name] = get_input(name, env) or file_inputs.get(name, "")
    return resolved


def _soft_bool(inputs: Mapping[str, str], name: str) -> bool:
    raw = inputs.get(name, "")
    try:
        return parse_bool(raw)
    except ValueError:
        logger.debug("Fail to parse %s %r, using false", name, raw)
        return False


def load_pipeline_config(
    inputs: Mapping[str, str],
    *,
    now: datetime | None = None,
) -> PipelineConfig:
    """Build the pipeline policy from resolved inputs.

    Unparsable booleans and durations fall back to false and no cutoff.
    """
    now = now or datetime.now(timezone.utc)

    cutoff: Optional[datetime] = None
    last_time = inputs.get(LAST_TIME_INPUT, "")
    try:
        cutoff = now - abs(parse_duration(last_time))
    except (ValueError, OverflowError):
        logger.debug("Fail to parse last time %r", last_time)
    logger.debug("cutoff %s", cutoff)

    labels = parse_labels(inputs.get(LABELS_INPUT, ""))
    logger.debug("labels %s", list(labels))

    character_limit: Optional[int] = None
    invalid_character_limit: Optional[str] = None
    raw_limit = inputs.get(CHARACTER_LIMIT_INPUT, "")
    if raw_limit:
        if _integer_re.fullmatch(raw_limit):
            character_limit = int(raw_limit)
        else:
            invalid_character_limit = raw_limit

    return PipelineConfig(
        cutoff=cutoff,
        labels=labels,
        prefix=inputs.get(PREFIX_INPUT, ""),
        aggregate=_soft_bool(inputs, AGGREGATE_INPUT),
        dry_run=_soft_bool(inputs, DRY_RUN_INPUT),
        title_exclude_filter=inputs.get(TITLE_FILTER_INPUT) or None,
        title_include_filter=inputs.get(TITLE_INCLUSION_FILTER_INPUT) or None,
        content_exclude_filter=inputs.get(CONTENT_FILTER_INPUT) or None,
        character_limit=character_limit,
        invalid_character_limit=invalid_character_limit,
    )


def load_run_settings(
    inputs: Mapping[str, str],
    env: Mapping[str, str] | None = None,
    *,
    repository: str | None = None,
) -> RunSettings:
    env = os.environ if env is None else env

    feed_url = inputs.get(FEED_INPUT, "")
    if not feed_url:
        raise ConfigError("Input 'feed' is required")

    repo = repository or env.get("GITHUB_REPOSITORY")
    owner, name = parse_repository(repo)

    token = inputs.get(REPO_TOKEN_INPUT) or env.get("GITHUB_TOKEN") or ""
    if not token:
        raise ConfigError("Input 'repo-token' (or GITHUB_TOKEN) is required")

    return RunSettings(
        feed_url=feed_url,
        repository=f"{owner}/{name}",
        token=token,
        api_url=env.get("GITHUB_API_URL") or None,
    )
