"""Content-mutation workflows driven by the HTTP surface."""

from editor_gateway.workflows.base import (
    NOT_AUTHENTICATED,
    StoreFactory,
    Workflow,
    github_store_factory,
)
from editor_gateway.workflows.browse import RepositoryBrowser
from editor_gateway.workflows.commit import CommitWorkflow, UploadWorkflow
from editor_gateway.workflows.image_proxy import (
    NO_CACHE_HEADERS,
    ImageProxy,
    ImageResponse,
)
from editor_gateway.workflows.pull_request import (
    MergeWorkflow,
    PrRun,
    PrStage,
    PullRequestWorkflow,
)
from editor_gateway.workflows.session import SessionWorkflow

__all__ = [
    "NOT_AUTHENTICATED",
    "NO_CACHE_HEADERS",
    "CommitWorkflow",
    "ImageProxy",
    "ImageResponse",
    "MergeWorkflow",
    "PrRun",
    "PrStage",
    "PullRequestWorkflow",
    "RepositoryBrowser",
    "SessionWorkflow",
    "StoreFactory",
    "UploadWorkflow",
    "Workflow",
    "github_store_factory",
]
