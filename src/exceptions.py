class WorkflowError(Exception):
    """Base class for every error raised while reorganizing a camera card."""


class InvalidLength(WorkflowError, ValueError):
    pass


class DirectoryReadError(WorkflowError):
    pass


class PreconditionError(WorkflowError):
    pass


class NotFound(PreconditionError):
    pass


class NotADirectory(PreconditionError):
    pass


class StatError(PreconditionError):
    pass


class DestinationMissing(PreconditionError):
    pass


class SourceMissing(PreconditionError):
    pass


class BackupMissing(PreconditionError):
    pass


class CopyFailure(WorkflowError):

    def __init__(self, message: str, path: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class DeleteFailure(WorkflowError):

    def __init__(self, message: str, path: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class EjectFailure(WorkflowError):
    pass


class RenameFailure(WorkflowError):
    pass


class StageFailure(WorkflowError):
    """A pipeline stage failed; the remaining stages were not attempted."""

    def __init__(self, stage: str, cause: Exception) -> None:
        super().__init__(f"{stage}: {cause}")
        self.stage = stage
