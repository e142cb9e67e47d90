"""Direct commits onto the default branch."""

from __future__ import annotations

import base64
import binascii
import logging
import urllib.parse

from editor_gateway.auth import ResolvedToken
from editor_gateway.models.results import WorkflowResult
from editor_gateway.providers.scm.errors import ContentStoreError
from editor_gateway.workflows.base import NOT_AUTHENTICATED, Workflow

logger = logging.getLogger(__name__)


class CommitWorkflow(Workflow):
    def commit(
        self,
        token: ResolvedToken | None,
        path: str | None,
        content: str,
        supplied_version: str | None = None,
    ) -> WorkflowResult:
        """Write ``content`` to ``path`` on the default branch.

        Without ``supplied_version`` the store looks up the current version
        first; a concurrent writer can still win the race, in which case the
        conflict is reported rather than retried.
        """
        if token is None:
            return WorkflowResult.fail(NOT_AUTHENTICATED)
        path = path or self._settings.default_file_path
        store = self._open_store(token)
        try:
            store.write_file(
                path,
                content.encode("utf-8"),
                expected_version=supplied_version or None,
                message=f"Update {path} from web editor",
            )
        except ContentStoreError as exc:
            logger.warning("Commit to %s failed: %s", path, exc.message)
            return WorkflowResult.fail(exc.message)
        logger.info("Committed %s", path)
        return WorkflowResult.ok("Committed successfully!")


class UploadWorkflow(Workflow):
    def upload(
        self,
        token: ResolvedToken | None,
        filename: str | None,
        content_b64: str | None,
    ) -> WorkflowResult:
        if token is None:
            return WorkflowResult.fail(NOT_AUTHENTICATED)
        if not filename:
            return WorkflowResult.fail("Missing filename")
        if content_b64 is None:
            return WorkflowResult.fail("Missing image content")
        try:
            # Editors may send line-wrapped base64.
            data = base64.b64decode("".join(content_b64.split()), validate=True)
        except (binascii.Error, ValueError):
            return WorkflowResult.fail("Image content must be base64 encoded")
        path = f"{self._settings.asset_dir}/{filename}"
        store = self._open_store(token)
        try:
            store.write_file(path, data, message=f"Upload image {filename}")
        except ContentStoreError as exc:
            logger.warning("Upload of %s failed: %s", path, exc.message)
            return WorkflowResult.fail(f"GitHub upload failed: {exc.message}")
        query = urllib.parse.urlencode({"name": filename, "t": self._now_ms()})
        url = f"{self._settings.public_base_url.rstrip('/')}/og-image.png?{query}"
        return WorkflowResult.ok("Image uploaded!", url=url)
