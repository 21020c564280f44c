from __future__ import annotations

import os
import uuid
from dataclasses import dataclass
from typing import Mapping, Sequence

from ..utils.logging import get_logger

logger = get_logger("f2i.output.reporter")


@dataclass(frozen=True, slots=True)
class PipelineError:
    """A recoverable failure recorded during the run."""

    stage: str
    subject: str
    message: str


@dataclass(slots=True)
class PipelineReport:
    entries_seen: int = 0
    duplicates_skipped: int = 0
    filtered: int = 0
    failed_entries: int = 0
    requests_queued: int = 0
    issues_created: int = 0
    submission_errors: int = 0
    dry_run: bool = False

    def to_markdown(self) -> str:
        mode = " (dry run)" if self.dry_run else ""
        return (
            f"### Feed to issues{mode}\n\n"
            f"- Entries processed: {self.entries_seen}\n"
            f"- Duplicates skipped: {self.duplicates_skipped}\n"
            f"- Filtered out: {self.filtered}\n"
            f"- Entries failed: {self.failed_entries}\n"
            f"- Issues queued: {self.requests_queued}\n"
            f"- Issues created: {self.issues_created}\n"
            f"- Submission errors: {self.submission_errors}\n"
        )


def format_issue_numbers(numbers: Sequence[int]) -> str:
    return ",".join(str(n) for n in numbers)


def write_action_output(name: str, value: str, env: Mapping[str, str] | None = None) -> None:
    """Set a step output.

    Appends to the ``$GITHUB_OUTPUT`` file when the runner provides one,
    otherwise prints ``name=value`` on stdout.
    """
    env = os.environ if env is None else env
    output_path = env.get("GITHUB_OUTPUT")
    if not output_path:
        print(f"{name}={value}")
        return
    with open(output_path, "a", encoding="utf-8") as f:
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            f.write(f"{name}={value}\n")
    logger.debug("Wrote output %s=%s", name, value)


def append_step_summary(report: PipelineReport, env: Mapping[str, str] | None = None) -> bool:
    env = os.environ if env is None else env
    summary_path = env.get("GITHUB_STEP_SUMMARY")
    if not summary_path:
        return False
    with open(summary_path, "a", encoding="utf-8") as f:
        f.write(report.to_markdown())
    return True
