from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True, slots=True)
class ExistingIssue:
    title: str
    number: int
    state: str = "open"


@dataclass(slots=True)
class IssueRequest:
    """Issue waiting to be created on the tracker.

    Mutated in place while entries are aggregated into it, then handed to the
    submitter as is.
    """

    title: str
    body: str
    labels: List[str] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"title": self.title, "body": self.body}
        if self.labels:
            payload["labels"] = list(self.labels)
        return payload
