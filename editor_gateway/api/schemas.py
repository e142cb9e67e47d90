"""Pydantic request models for the editor gateway API."""

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class _EditorRequest(BaseModel):
    # The editor also sends the session token in the body; it is read separately.
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CommitRequest(_EditorRequest):
    content: str
    file_path: str | None = Field(default=None, alias="filePath")
    sha: str | None = None


class CreatePullRequestRequest(_EditorRequest):
    title: str | None = None
    body: str | None = None
    content: str
    file_path: str | None = Field(default=None, alias="filePath")


class MergePullRequestRequest(_EditorRequest):
    pr_number: StrictInt | str | None = Field(default=None, alias="prNumber")


class UploadImageRequest(_EditorRequest):
    content: str
    filename: str | None = None
