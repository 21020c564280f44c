from __future__ import annotations

from typing import List, Optional, Sequence

import requests
from github import Auth, Github, GithubException

from ..models import ExistingIssue, IssueRequest
from ..utils.logging import get_logger

logger = get_logger("f2i.output.github")


class TrackerError(Exception):
    """Raised when a GitHub API call fails."""


class GitHubClient:
    """Thin wrapper over PyGithub for the two calls the pipeline needs.

    Every call is made once; failures surface as :class:`TrackerError` and
    the caller decides whether they are fatal.
    """

    def __init__(
        self,
        *,
        token: str,
        repository: str,
        base_url: Optional[str] = None,
        github: Optional[Github] = None,
    ) -> None:
        self.repository = repository
        if github is None:
            kwargs = {"auth": Auth.Token(token)}
            if base_url:
                kwargs["base_url"] = base_url
            github = Github(**kwargs)
        self._client = github
        self._repo = None

    def _get_repo(self):
        if self._repo is None:
            try:
                self._repo = self._client.get_repo(self.repository)
            except (GithubException, requests.RequestException) as exc:
                raise TrackerError(f"Cannot access repository {self.repository}: {exc}") from exc
        return self._repo

    def list_issues(self, *, state: str = "all", labels: Sequence[str] = ()) -> List[ExistingIssue]:
        """Return every issue in the repository matching ``state`` and ``labels``.

        All result pages are read.
        """
        repo = self._get_repo()
        kwargs = {"state": state}
        if labels:
            kwargs["labels"] = list(labels)
        try:
            issues = [
                ExistingIssue(title=issue.title, number=issue.number, state=issue.state)
                for issue in repo.get_issues(**kwargs)
            ]
        except (GithubException, requests.RequestException) as exc:
            raise TrackerError(f"Cannot list issues of {self.repository}: {exc}") from exc
        logger.debug("%d issues", len(issues))
        return issues

    def create_issue(self, request: IssueRequest) -> int:
        repo = self._get_repo()
        try:
            issue = repo.create_issue(**request.to_payload())
        except (GithubException, requests.RequestException) as exc:
            raise TrackerError(str(exc)) from exc
        logger.info("Created GitHub issue #%s: %s", issue.number, request.title)
        return issue.number
