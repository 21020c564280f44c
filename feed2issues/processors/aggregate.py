from __future__ import annotations

import enum
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from ..models import IssueRequest
from ..utils.logging import get_logger
from .dedup import compose_title

logger = get_logger("f2i.processors.aggregate")

# Go's time.RFC822 layout, e.g. "19 Oct 26 14:05 UTC"
RFC822_FORMAT = "%d %b %y %H:%M %Z"

Clock = Callable[[], datetime]


def local_now() -> datetime:
    return datetime.now().astimezone()


def format_rfc822(moment: datetime) -> str:
    return moment.strftime(RFC822_FORMAT).strip()


class AggregatorState(enum.Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"


class Aggregator:
    """Collect issue requests, one per entry or folded into one.

    With aggregation off every :meth:`add` queues a new request. With it on,
    the first :meth:`add` creates the accumulator and moves to
    ``ACCUMULATING``; later calls append their body to it and retitle it
    with the prefix and the current time.
    """

    def __init__(
        self,
        *,
        prefix: str = "",
        labels: Sequence[str] = (),
        enabled: bool = False,
        clock: Clock = local_now,
    ) -> None:
        self.prefix = prefix
        self.labels = list(labels)
        self.enabled = enabled
        self.clock = clock
        self.state = AggregatorState.IDLE
        self._requests: List[IssueRequest] = []
        self._accumulator: Optional[IssueRequest] = None

    @property
    def requests(self) -> List[IssueRequest]:
        return list(self._requests)

    def add(self, title: str, body: str) -> IssueRequest:
        if not self.enabled:
            return self._queue(title, body)
        if self.state is AggregatorState.IDLE:
            self._accumulator = self._queue(title, body)
            self.state = AggregatorState.ACCUMULATING
            return self._accumulator
        return self.fold(body)

    def fold(self, body: str) -> IssueRequest:
        """Append ``body`` to the accumulator and retitle it."""
        if self.state is not AggregatorState.ACCUMULATING or self._accumulator is None:
            raise RuntimeError("fold() called before the first entry was aggregated")
        acc = self._accumulator
        acc.title = compose_title(self.prefix, format_rfc822(self.clock()))
        acc.body = f"{acc.body}\n\n{body}"
        logger.debug("Folded entry into aggregate issue '%s'", acc.title)
        return acc

    def _queue(self, title: str, body: str) -> IssueRequest:
        request = IssueRequest(title=title, body=body, labels=list(self.labels))
        self._requests.append(request)
        return request
