"""Project aggregate exceptions."""

from .base import ConflictError, NotFoundError, ValidationError


class ProjectNotFoundError(NotFoundError):
    """Raised when a project does not exist."""

    def __init__(self):
        super().__init__("Project")


class UsageNotFoundError(NotFoundError):
    """Raised when a usage item id is not present in the project's collection."""

    def __init__(self, label: str):
        super().__init__(f"{label} usage")


class DuplicateUsageError(ConflictError):
    """Raised when adding a usage item whose reference is already attached."""

    def __init__(self, label: str):
        super().__init__(f"{label} already added to this project", details={"kind": label.lower()})


class DuplicateReferenceError(ValidationError):
    """Raised when a payload lists the same catalog reference twice."""

    def __init__(self, kind: str):
        super().__init__(
            f"Cannot add the same {kind} multiple times to a project", details={"kind": kind}
        )


class MultiplePrimaryError(ValidationError):
    """Raised when more than one usage item of a kind is marked primary."""

    def __init__(self, kind: str):
        super().__init__(f"Only one {kind} can be marked as primary", details={"kind": kind})
