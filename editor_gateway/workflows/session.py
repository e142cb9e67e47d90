"""Connectivity and token checks."""

from __future__ import annotations

from editor_gateway.auth import ResolvedToken, TokenOrigin
from editor_gateway.models.results import WorkflowResult
from editor_gateway.providers.scm.errors import ContentStoreError
from editor_gateway.workflows.base import Workflow


class SessionWorkflow(Workflow):
    def check_connection(self, token: ResolvedToken | None) -> WorkflowResult:
        """Report where the credential came from without calling the remote."""
        if token is None:
            return WorkflowResult.fail("No token found. Set GITHUB_TOKEN in the environment.")
        if token.origin is TokenOrigin.ENVIRONMENT:
            return WorkflowResult.ok("Connected via Environment Variable")
        return WorkflowResult.ok("Connected via Session")

    def test_token(self, token: ResolvedToken | None) -> WorkflowResult:
        if token is None:
            return WorkflowResult.fail("No token set.")
        store = self._open_store(token)
        try:
            user = store.get_authenticated_user()
        except ContentStoreError as exc:
            if exc.status is None:
                return WorkflowResult.fail(exc.message)
            return WorkflowResult.fail(f"Token test failed: {exc.status} - {exc.message}")
        return WorkflowResult.ok(f"Logged in as: {user.login}")
