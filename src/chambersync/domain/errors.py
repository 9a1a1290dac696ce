"""Domain error taxonomy.

``PreconditionError`` subclasses are user-facing rejections raised before any
state is mutated; the message is safe to show to the caller.
"""

from __future__ import annotations


class ChamberSyncError(Exception):
    """Base class for domain errors."""


class PreconditionError(ChamberSyncError):
    """An operation was rejected because its preconditions do not hold."""


class ChamberNotFoundError(PreconditionError):
    def __init__(self, message: str = "Chamber not found") -> None:
        super().__init__(message)


class ProfileNotFoundError(PreconditionError):
    def __init__(self, message: str = "User profile not found") -> None:
        super().__init__(message)


class MemberNotFoundError(PreconditionError):
    def __init__(self, message: str = "ChamberMaster member not found") -> None:
        super().__init__(message)


class MemberAlreadyClaimedError(PreconditionError):
    def __init__(self, message: str = "This business has already been claimed") -> None:
        super().__init__(message)


class MerchantAlreadyLinkedError(PreconditionError):
    def __init__(self, message: str = "You already have a merchant account") -> None:
        super().__init__(message)


class PendingClaimExistsError(PreconditionError):
    def __init__(self, message: str = "You already have a pending claim request") -> None:
        super().__init__(message)


class ClaimNotFoundError(PreconditionError):
    def __init__(self, message: str = "Claim request not found") -> None:
        super().__init__(message)


class ClaimNotPendingError(PreconditionError):
    def __init__(self, message: str = "Claim has already been resolved") -> None:
        super().__init__(message)


class DenialReasonRequiredError(PreconditionError):
    def __init__(self, message: str = "Denial reason is required") -> None:
        super().__init__(message)


class DirectoryNotConfiguredError(PreconditionError):
    def __init__(self, message: str = "ChamberMaster is not configured for this chamber") -> None:
        super().__init__(message)


class PermissionDeniedError(PreconditionError):
    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message)


class InvalidPageError(PreconditionError):
    def __init__(self, message: str = "Page and limit must be positive integers") -> None:
        super().__init__(message)


class DirectoryRequestError(ChamberSyncError):
    """The external member directory could not be read."""

    def __init__(self, message: str = "ChamberMaster API request failed") -> None:
        super().__init__(message)


class SyncRunStateError(ChamberSyncError):
    """A sync run was asked to leave a terminal state."""
