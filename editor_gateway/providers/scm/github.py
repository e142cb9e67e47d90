"""GitHub content store backed by the GitHub REST API."""

from __future__ import annotations

import base64
import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from editor_gateway.models.scm import (
    Branch,
    PullRequestInfo,
    PullRequestState,
    RemoteFile,
    RemoteUser,
    RepoEntry,
)
from editor_gateway.providers.scm.base import ContentStore
from editor_gateway.providers.scm.errors import (
    ConflictError,
    NotFoundError,
    UnavailableError,
)

logger = logging.getLogger(__name__)

ACCEPT_MEDIA_TYPE = "application/vnd.github.v3+json"
UNEXPECTED_RESPONSE = "Unexpected response from GitHub API."


def encode_content(content: bytes) -> str:
    return base64.b64encode(content).decode("ascii")


def decode_content(content: str) -> bytes:
    # The contents API wraps base64 at 60 columns.
    return base64.b64decode("".join(content.split()))


def _require(response: Any, *keys: str) -> dict[str, Any]:
    if not isinstance(response, dict) or any(key not in response for key in keys):
        raise UnavailableError(UNEXPECTED_RESPONSE)
    return response


class GitHubContentStore(ContentStore):
    def __init__(
        self,
        token: str | None,
        repo: str,
        default_branch: str = "main",
        base_url: str = "https://api.github.com",
        timeout_s: float | None = None,
    ) -> None:
        self._token = token
        self._repo = repo
        self._default_branch = default_branch
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s

    def _ensure_token(self) -> str:
        if not self._token:
            raise ValueError("GitHub token is required (set GITHUB_TOKEN or send a token).")
        return self._token

    def _repo_path(self, suffix: str) -> str:
        return f"/repos/{self._repo}{suffix}"

    def _contents_path(self, path: str) -> str:
        quoted = urllib.parse.quote(path.strip("/"), safe="/")
        return self._repo_path(f"/contents/{quoted}" if quoted else "/contents")

    def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
        conflict_statuses: tuple[int, ...] = (),
    ) -> Any:
        token = self._ensure_token()
        url = f"{self._base_url}{path}"
        data = None
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
        request = urllib.request.Request(url, data=data, method=method)
        request.add_header("Accept", ACCEPT_MEDIA_TYPE)
        request.add_header("User-Agent", "editor-gateway")
        request.add_header("Authorization", f"token {token}")
        if data is not None:
            request.add_header("Content-Type", "application/json")
        kwargs: dict[str, Any] = {}
        if self._timeout_s is not None:
            kwargs["timeout"] = self._timeout_s
        logger.debug("GitHub %s %s", method, path)
        try:
            with urllib.request.urlopen(request, **kwargs) as response:
                raw = response.read()
                return json.loads(raw.decode("utf-8")) if raw else None
        except urllib.error.HTTPError as exc:
            body = exc.read().decode("utf-8", errors="replace")
            logger.debug("GitHub %s %s failed with %s", method, path, exc.code)
            if exc.code == 404:
                raise NotFoundError(body, status=exc.code) from exc
            if exc.code in conflict_statuses:
                raise ConflictError(body, status=exc.code) from exc
            raise UnavailableError(body, status=exc.code) from exc
        except urllib.error.URLError as exc:
            raise UnavailableError(str(exc.reason)) from exc
        # Failures while waiting for the response are not wrapped in URLError.
        except (OSError, http.client.HTTPException) as exc:
            raise UnavailableError(str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise UnavailableError(UNEXPECTED_RESPONSE) from exc

    def read_file(self, path: str, ref: str | None = None) -> RemoteFile:
        request_path = self._contents_path(path)
        if ref:
            request_path += "?" + urllib.parse.urlencode({"ref": ref})
        response = _require(self._request("GET", request_path), "content", "sha")
        if response.get("encoding") == "none":
            # Files over 1 MB come back without inline content.
            blob = _require(
                self._request("GET", self._repo_path(f"/git/blobs/{response['sha']}")),
                "content",
            )
            return RemoteFile(path=path, content=decode_content(blob["content"]), version=response["sha"])
        return RemoteFile(
            path=path,
            content=decode_content(response["content"]),
            version=response["sha"],
        )

    def _current_version(self, path: str, ref: str | None = None) -> str | None:
        try:
            return self.read_file(path, ref=ref).version
        except NotFoundError:
            return None

    def _put_contents(
        self,
        path: str,
        content: bytes,
        version: str | None,
        message: str,
        branch: str | None = None,
    ) -> RemoteFile:
        payload: dict[str, Any] = {"message": message, "content": encode_content(content)}
        if version:
            payload["sha"] = version
        if branch:
            payload["branch"] = branch
        response = self._request(
            "PUT",
            self._contents_path(path),
            payload,
            conflict_statuses=(409, 422),
        )
        written = _require(response, "content").get("content")
        if not isinstance(written, dict) or "sha" not in written:
            raise UnavailableError(UNEXPECTED_RESPONSE)
        return RemoteFile(path=path, content=content, version=written["sha"])

    def write_file(
        self,
        path: str,
        content: bytes,
        expected_version: str | None = None,
        message: str | None = None,
    ) -> RemoteFile:
        version = expected_version
        if version is None:
            version = self._current_version(path)
        return self._put_contents(path, content, version, message or f"Update {path}")

    def write_file_on_branch(
        self,
        path: str,
        content: bytes,
        branch: str,
        message: str | None = None,
    ) -> RemoteFile:
        version = self._current_version(path, ref=branch)
        return self._put_contents(
            path, content, version, message or f"Update {path}", branch=branch
        )

    def get_branch_tip(self, branch: str) -> str:
        response = self._request(
            "GET", self._repo_path(f"/git/ref/heads/{urllib.parse.quote(branch)}")
        )
        target = _require(response, "object")["object"]
        if not isinstance(target, dict) or "sha" not in target:
            raise UnavailableError(UNEXPECTED_RESPONSE)
        return target["sha"]

    def create_branch(self, name: str, base_ref: str) -> Branch:
        self._request(
            "POST",
            self._repo_path("/git/refs"),
            {"ref": f"refs/heads/{name}", "sha": base_ref},
            conflict_statuses=(422,),
        )
        return Branch(name=name, base_commit=base_ref)

    def open_pull_request(
        self,
        head_branch: str,
        base_branch: str,
        title: str,
        body: str,
    ) -> PullRequestInfo:
        payload = {
            "title": title,
            "body": body,
            "head": head_branch,
            "base": base_branch,
        }
        response = _require(
            self._request("POST", self._repo_path("/pulls"), payload),
            "number",
            "html_url",
        )
        return PullRequestInfo(
            url=response["html_url"],
            number=response["number"],
            head_branch=head_branch,
            base_branch=base_branch,
            title=title,
        )

    def merge_pull_request(self, number: int) -> PullRequestInfo:
        payload = {"commit_title": f"Merge PR #{number}", "merge_method": "merge"}
        response = self._request(
            "PUT",
            self._repo_path(f"/pulls/{number}/merge"),
            payload,
            conflict_statuses=(405, 409),
        )
        if isinstance(response, dict) and response.get("merged") is False:
            raise ConflictError(str(response.get("message", "Pull request was not merged.")))
        return PullRequestInfo(
            url="",
            number=number,
            base_branch=self._default_branch,
            state=PullRequestState.MERGED,
        )

    def get_authenticated_user(self) -> RemoteUser:
        response = _require(self._request("GET", "/user"), "login")
        return RemoteUser(login=response["login"])

    def list_directory(self, path: str = "") -> list[RepoEntry]:
        response = self._request("GET", self._contents_path(path))
        if not isinstance(response, list):
            raise UnavailableError(UNEXPECTED_RESPONSE)
        return [
            RepoEntry(name=item["name"], path=item["path"], type=item.get("type", "file"))
            for item in response
            if isinstance(item, dict) and "name" in item and "path" in item
        ]

    def list_open_pull_requests(self) -> list[PullRequestInfo]:
        response = self._request("GET", self._repo_path("/pulls?state=open"))
        if not isinstance(response, list):
            raise UnavailableError(UNEXPECTED_RESPONSE)
        pulls: list[PullRequestInfo] = []
        for item in response:
            if not isinstance(item, dict) or "number" not in item:
                continue
            pulls.append(
                PullRequestInfo(
                    url=item.get("html_url", ""),
                    number=item["number"],
                    head_branch=item.get("head", {}).get("ref", ""),
                    base_branch=item.get("base", {}).get("ref", ""),
                    title=item.get("title", ""),
                )
            )
        return pulls
