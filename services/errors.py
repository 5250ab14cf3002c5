"""
Domain error taxonomy.

Services raise these; the API layer maps each class to an HTTP status.
Messages are written for end users and never carry storage-engine detail
(constraint names, SQL). Invalid input is reported with ValueError.
"""


class DomainError(Exception):
    """Base class for every error the domain layer raises on purpose."""

    default_message = "Request could not be completed"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class NotAuthenticatedError(DomainError):
    """No resolvable caller identity."""
    default_message = "User not authenticated"


class NotAMemberError(DomainError):
    """Caller does not belong to any organization."""
    default_message = "User is not a member of any organization"


class NotFoundError(DomainError):
    """Row missing or outside the caller's organization (deliberately indistinguishable)."""
    default_message = "Resource not found"


class NotEligibleError(DomainError):
    """A precondition of the operation does not hold."""
    default_message = "Operation not allowed in the current state"


class ConflictError(DomainError):
    """Uniqueness or invariant violation detected at write time."""
    default_message = "Conflicting change; reload and try again"


class DuplicateInvitationError(ConflictError):
    default_message = "Invitation already sent to this email"


class AlreadyMemberError(ConflictError):
    default_message = "User is already a member of this organization"


class ExpiredResourceError(DomainError):
    default_message = "Invitation has expired"


class UploadFailed(DomainError):
    """Blob transport or document row failure during upload."""
    default_message = "Upload failed"
