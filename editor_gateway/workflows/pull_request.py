"""Branch, commit and pull request workflows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any

from editor_gateway.auth import ResolvedToken
from editor_gateway.models.results import WorkflowResult
from editor_gateway.models.scm import Branch, PullRequestInfo
from editor_gateway.providers.scm.errors import ContentStoreError
from editor_gateway.workflows.base import NOT_AUTHENTICATED, Workflow

logger = logging.getLogger(__name__)


class PrStage(str, Enum):
    RESOLVE_BASE = "resolve_base"
    CREATE_BRANCH = "create_branch"
    WRITE_ON_BRANCH = "write_on_branch"
    OPEN_PR = "open_pr"
    DONE = "done"


@dataclass
class PrRun:
    """State carried from one stage to the next within a single invocation."""

    path: str
    content: bytes
    title: str
    body: str
    branch_name: str
    stage: PrStage = PrStage.RESOLVE_BASE
    base_commit: str | None = None
    branch: Branch | None = None
    pull_request: PullRequestInfo | None = None

    def orphans(self) -> list[str]:
        leftovers: list[str] = []
        if self.branch is not None:
            leftovers.append(f"branch {self.branch.name}")
        if self.stage is PrStage.OPEN_PR:
            leftovers.append(f"commit of {self.path} on {self.branch_name}")
        return leftovers


class PullRequestWorkflow(Workflow):
    """Fork a branch from the default tip, commit one file, open a PR.

    Stages run strictly in order. A failure stops the run where it happened;
    nothing created by earlier stages is rolled back, so a failed run can
    leave a branch (and its commit) behind on the remote.
    """

    def create(
        self,
        token: ResolvedToken | None,
        path: str | None,
        content: str,
        title: str | None = None,
        body: str | None = None,
    ) -> WorkflowResult:
        if token is None:
            return WorkflowResult.fail(NOT_AUTHENTICATED)
        store = self._open_store(token)
        run = PrRun(
            path=path or self._settings.default_file_path,
            content=content.encode("utf-8"),
            title=title or "Update",
            body=body or "",
            branch_name=f"{self._settings.branch_prefix}-{self._now_ms()}",
        )
        default_branch = self._settings.default_branch
        try:
            run.base_commit = store.get_branch_tip(default_branch)
            run.stage = PrStage.CREATE_BRANCH
            run.branch = store.create_branch(run.branch_name, run.base_commit)
            run.stage = PrStage.WRITE_ON_BRANCH
            store.write_file_on_branch(
                run.path,
                run.content,
                run.branch_name,
                message="Update from web editor",
            )
            run.stage = PrStage.OPEN_PR
            run.pull_request = store.open_pull_request(
                run.branch_name, default_branch, run.title, run.body
            )
            run.stage = PrStage.DONE
        except ContentStoreError as exc:
            logger.warning("Pull request run failed at %s: %s", run.stage.value, exc.message)
            orphans = run.orphans()
            if orphans:
                logger.warning("Left on remote after failed run: %s", ", ".join(orphans))
            return WorkflowResult.fail(exc.message)
        logger.info(
            "Opened pull request #%s from %s", run.pull_request.number, run.branch_name
        )
        return WorkflowResult.ok(f"PR created: {run.pull_request.url}")


class MergeWorkflow(Workflow):
    def merge(self, token: ResolvedToken | None, pr_number: Any) -> WorkflowResult:
        if token is None:
            return WorkflowResult.fail(NOT_AUTHENTICATED)
        invalid = WorkflowResult.fail(f"Invalid pull request number: {pr_number!r}")
        if isinstance(pr_number, bool):
            return invalid
        if isinstance(pr_number, float) and not pr_number.is_integer():
            return invalid
        try:
            number = int(pr_number)
        except (TypeError, ValueError):
            return invalid
        store = self._open_store(token)
        try:
            store.merge_pull_request(number)
        except ContentStoreError as exc:
            logger.warning("Merge of PR #%s failed: %s", number, exc.message)
            return WorkflowResult.fail(exc.message)
        return WorkflowResult.ok(f"PR #{number} merged!")
