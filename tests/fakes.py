"""In-memory stand-ins for the remote repository."""

from __future__ import annotations

import base64
import hashlib
import io
import itertools
import json
from typing import Any
import urllib.error
import urllib.parse

from editor_gateway.models.scm import (
    Branch,
    PullRequestInfo,
    PullRequestState,
    RemoteFile,
    RemoteUser,
    RepoEntry,
)
from editor_gateway.providers.scm.errors import (
    ConflictError,
    ContentStoreError,
    NotFoundError,
)


class FakeContentStore:
    """Content store with the same version rules as the real one."""

    def __init__(self, default_branch: str = "main") -> None:
        self.default_branch = default_branch
        self.branches: dict[str, str] = {default_branch: "c0"}
        self.files: dict[str, dict[str, RemoteFile]] = {default_branch: {}}
        self.pulls: dict[int, PullRequestInfo] = {}
        self.calls: list[str] = []
        self.tokens: list[str] = []
        self.failures: dict[str, Exception] = {}
        self.user = "octocat"
        self._counter = itertools.count(1)

    def factory(self, token: str) -> "FakeContentStore":
        self.tokens.append(token)
        return self

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failures:
            raise self.failures[name]

    def _version(self, content: bytes) -> str:
        digest = hashlib.sha1(content + str(next(self._counter)).encode()).hexdigest()
        return digest

    def seed(self, path: str, content: bytes, branch: str | None = None) -> RemoteFile:
        branch = branch or self.default_branch
        remote = RemoteFile(path=path, content=content, version=self._version(content))
        self.files[branch][path] = remote
        return remote

    def _put(self, branch: str, path: str, content: bytes, version: str | None) -> RemoteFile:
        if branch not in self.files:
            raise NotFoundError("Branch not found", status=404)
        current = self.files[branch].get(path)
        if current is not None and version != current.version:
            raise ConflictError(f"{path} does not match {version}", status=409)
        if current is None and version is not None:
            raise ConflictError(f"{path} does not match {version}", status=409)
        written = RemoteFile(path=path, content=content, version=self._version(content))
        self.files[branch][path] = written
        self.branches[branch] = f"c{next(self._counter)}"
        return written

    def read_file(self, path: str, ref: str | None = None) -> RemoteFile:
        self._record("read_file")
        branch = ref or self.default_branch
        remote = self.files.get(branch, {}).get(path)
        if remote is None:
            raise NotFoundError('{"message":"Not Found"}', status=404)
        return remote

    def write_file(
        self,
        path: str,
        content: bytes,
        expected_version: str | None = None,
        message: str | None = None,
    ) -> RemoteFile:
        version = expected_version
        if version is None:
            try:
                version = self.read_file(path).version
            except NotFoundError:
                version = None
        self._record("write_file")
        return self._put(self.default_branch, path, content, version)

    def write_file_on_branch(
        self,
        path: str,
        content: bytes,
        branch: str,
        message: str | None = None,
    ) -> RemoteFile:
        try:
            version = self.read_file(path, ref=branch).version
        except NotFoundError:
            version = None
        self._record("write_file_on_branch")
        return self._put(branch, path, content, version)

    def get_branch_tip(self, branch: str) -> str:
        self._record("get_branch_tip")
        if branch not in self.branches:
            raise NotFoundError("Not Found", status=404)
        return self.branches[branch]

    def create_branch(self, name: str, base_ref: str) -> Branch:
        self._record("create_branch")
        if name in self.branches:
            raise ConflictError("Reference already exists", status=422)
        self.branches[name] = base_ref
        self.files[name] = dict(self.files[self.default_branch])
        return Branch(name=name, base_commit=base_ref)

    def open_pull_request(
        self,
        head_branch: str,
        base_branch: str,
        title: str,
        body: str,
    ) -> PullRequestInfo:
        self._record("open_pull_request")
        number = len(self.pulls) + 1
        pr = PullRequestInfo(
            url=f"https://github.com/compusophy/world-world/pull/{number}",
            number=number,
            head_branch=head_branch,
            base_branch=base_branch,
            title=title,
        )
        self.pulls[number] = pr
        return pr

    def merge_pull_request(self, number: int) -> PullRequestInfo:
        self._record("merge_pull_request")
        pr = self.pulls.get(number)
        if pr is None:
            raise NotFoundError('{"message":"Not Found"}', status=404)
        if pr.state is not PullRequestState.OPEN:
            raise ConflictError('{"message":"Pull Request is not mergeable"}', status=405)
        self.files[pr.base_branch].update(self.files[pr.head_branch])
        merged = PullRequestInfo(
            url=pr.url,
            number=number,
            head_branch=pr.head_branch,
            base_branch=pr.base_branch,
            state=PullRequestState.MERGED,
            title=pr.title,
        )
        self.pulls[number] = merged
        return merged

    def get_authenticated_user(self) -> RemoteUser:
        self._record("get_authenticated_user")
        return RemoteUser(login=self.user)

    def list_directory(self, path: str = "") -> list[RepoEntry]:
        self._record("list_directory")
        entries: dict[str, RepoEntry] = {}
        for file_path in sorted(self.files[self.default_branch]):
            head, _, rest = file_path.partition("/")
            if rest:
                entries[head] = RepoEntry(name=head, path=head, type="dir")
            else:
                entries[head] = RepoEntry(name=head, path=file_path, type="file")
        return list(entries.values())

    def list_open_pull_requests(self) -> list[PullRequestInfo]:
        self._record("list_open_pull_requests")
        return [pr for pr in self.pulls.values() if pr.state is PullRequestState.OPEN]


class _FakeResponse:
    def __init__(self, body: bytes) -> None:
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "_FakeResponse":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        return None


def _wrap_base64(data: bytes) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return "\n".join(encoded[i : i + 60] for i in range(0, len(encoded), 60)) + "\n"


class FakeGitHubApi:
    """Serves the handful of GitHub REST endpoints the gateway uses."""

    def __init__(self, repo: str = "compusophy/world-world") -> None:
        self.repo = repo
        self.store = FakeContentStore()
        self.requests: list[dict[str, Any]] = []

    def urlopen(self, request: Any, timeout: float | None = None) -> _FakeResponse:
        parsed = urllib.parse.urlsplit(request.full_url)
        query = dict(urllib.parse.parse_qsl(parsed.query))
        body = json.loads(request.data.decode("utf-8")) if request.data else None
        self.requests.append(
            {
                "method": request.get_method(),
                "path": parsed.path,
                "query": query,
                "body": body,
                "headers": dict(request.header_items()),
                "timeout": timeout,
            }
        )
        status, payload = self._dispatch(request.get_method(), parsed.path, query, body)
        raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
        if status >= 400:
            raise urllib.error.HTTPError(request.full_url, status, "error", None, io.BytesIO(raw))
        return _FakeResponse(raw)

    def _dispatch(
        self,
        method: str,
        path: str,
        query: dict[str, str],
        body: dict[str, Any] | None,
    ) -> tuple[int, Any]:
        prefix = f"/repos/{self.repo}"
        if path == "/user" and method == "GET":
            return 200, {"login": self.store.user}
        if not path.startswith(prefix):
            return 404, {"message": "Not Found"}
        rest = path[len(prefix):]
        try:
            if rest.startswith("/contents/"):
                file_path = urllib.parse.unquote(rest[len("/contents/"):])
                if method == "GET":
                    remote = self.store.read_file(file_path, ref=query.get("ref"))
                    return 200, {
                        "content": _wrap_base64(remote.content),
                        "encoding": "base64",
                        "sha": remote.version,
                    }
                return self._put_contents(file_path, body or {})
            if rest.startswith("/git/ref/heads/") and method == "GET":
                return 200, {"object": {"sha": self.store.get_branch_tip(rest[len("/git/ref/heads/"):])}}
            if rest == "/git/refs" and method == "POST":
                name = body["ref"][len("refs/heads/"):]
                self.store.create_branch(name, body["sha"])
                return 201, {"ref": body["ref"], "object": {"sha": body["sha"]}}
            if rest == "/pulls" and method == "POST":
                pr = self.store.open_pull_request(body["head"], body["base"], body["title"], body["body"])
                return 201, {"number": pr.number, "html_url": pr.url}
            if rest.startswith("/pulls/") and rest.endswith("/merge") and method == "PUT":
                number = int(rest.split("/")[2])
                self.store.merge_pull_request(number)
                return 200, {"sha": "m1", "merged": True, "message": "Pull Request successfully merged"}
        except ContentStoreError as exc:
            return exc.status or 500, exc.message.encode("utf-8")
        return 404, {"message": "Not Found"}

    def _put_contents(self, path: str, body: dict[str, Any]) -> tuple[int, Any]:
        branch = body.get("branch") or self.store.default_branch
        current = self.store.files.get(branch, {}).get(path)
        sha = body.get("sha")
        if current is not None and sha is None:
            return 422, {"message": 'Invalid request.\n\n"sha" wasn\'t supplied.'}
        content = base64.b64decode(body["content"])
        written = self.store._put(branch, path, content, sha)
        return (200 if current else 201), {"content": {"path": path, "sha": written.version}}
