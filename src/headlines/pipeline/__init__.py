"""Worker thread, channels and poll adapter bridging fetches and the presentation loop."""

from headlines.pipeline.channels import ArticleChannel, ControlChannel, KeySet, Refresh, Shutdown
from headlines.pipeline.poll import PollAdapter
from headlines.pipeline.worker import FeedWorker, WorkerState

__all__ = [
    "ArticleChannel",
    "ControlChannel",
    "FeedWorker",
    "KeySet",
    "PollAdapter",
    "Refresh",
    "Shutdown",
    "WorkerState",
]
