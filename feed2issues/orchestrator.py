from __future__ import annotations

from typing import Callable, Optional

from .fetchers import Feed, fetch_feed
from .output.github_client import GitHubClient
from .pipeline.issue_pipeline import PipelineResult, run_pipeline
from .processors.aggregate import Clock, local_now
from .processors.filters import drop_stale_entries
from .utils.logging import get_logger
from .utils.pipeline_config import PipelineConfig, RunSettings

logger = get_logger("f2i.orchestrator")

FeedFetcher = Callable[..., Feed]


class Orchestrator:
    """Wire the collaborators around the pipeline for one run.

    ``FeedFetchError`` and ``TrackerError`` raised while fetching the feed or
    listing existing issues propagate: both are fatal for the run.
    """

    def __init__(
        self,
        settings: RunSettings,
        config: PipelineConfig,
        *,
        client: Optional[GitHubClient] = None,
        fetcher: FeedFetcher = fetch_feed,
        clock: Clock = local_now,
    ) -> None:
        self.settings = settings
        self.config = config
        self.client = client or GitHubClient(
            token=settings.token,
            repository=settings.repository,
            base_url=settings.api_url,
        )
        self.fetcher = fetcher
        self.clock = clock

    def run(self) -> PipelineResult:
        feed = self.fetcher(self.settings.feed_url, timeout=self.settings.timeout)
        logger.info("%s", feed.title)

        entries = drop_stale_entries(feed.entries, self.config.cutoff)
        if len(entries) != len(feed.entries):
            logger.info("Dropped %d entries older than %s", len(feed.entries) - len(entries), self.config.cutoff)

        existing = self.client.list_issues(state="all", labels=self.config.labels)

        return run_pipeline(
            entries,
            existing,
            self.config,
            tracker=self.client,
            clock=self.clock,
        )
