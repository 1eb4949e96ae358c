"""Exception types shared by the build pipeline"""


class PagePubError(Exception):
    """Base class for pagepub errors."""


class FrontMatterError(PagePubError, ValueError):
    """Document metadata header could not be decoded. Recoverable per document."""


class TaskFailed(PagePubError, RuntimeError):
    """A batch task stopped; already-written output is left in place."""

    def __init__(self, task: str, detail: str = ""):
        self.task = task
        self.detail = detail
        msg = f'Task "{task}" failed.'
        super().__init__(f"{msg} {detail}" if detail else msg)
