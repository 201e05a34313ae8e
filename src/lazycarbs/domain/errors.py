"""Error taxonomy for the LazyCarbs client engine."""


class LazyCarbsError(Exception):
    """Base class for every outcome reported by the engine."""


class LocalValidationError(LazyCarbsError):
    """Input rejected locally; no request was sent."""


class EmptyCredential(LocalValidationError):
    """The submitted API key was blank."""


class NoPendingEdit(LocalValidationError):
    """There is no edited value to save for the key."""


class InvalidValue(LocalValidationError):
    """A factor value is not a finite positive number."""


class InvalidRange(LocalValidationError):
    """A range request is malformed or out of bounds."""


class InvalidInput(LocalValidationError):
    """A calculation request contains invalid numbers."""


class PipelineNotReady(LocalValidationError):
    """The calculation pipeline cannot accept a submission in its state."""


class CredentialRequired(LazyCarbsError):
    """A valid API key is needed; no request was sent."""


class NoCredential(CredentialRequired):
    """A mutating call was refused because the gate is not valid."""


class PersistenceNeedsCredential(CredentialRequired):
    """Persisting a calculation requires a valid API key."""


class Unauthorized(LazyCarbsError):
    """The server rejected the API key; the credential was invalidated."""


class RemoteFailure(LazyCarbsError):
    """The server answered with a non-success response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SaveFailed(RemoteFailure):
    """Saving a factor failed on the server."""


class CalculationFailed(RemoteFailure):
    """The bolus calculation failed on the server."""


class DefaultsUnavailable(RemoteFailure):
    """Calorie factor defaults could not be loaded."""


class FactorsUnavailable(RemoteFailure):
    """Hourly bolus factors could not be loaded."""


class RangeApplyFailed(LazyCarbsError):
    """A range apply stopped at its first failing hour."""

    def __init__(
        self, failed_hour: int, committed_hours: list[int], cause: LazyCarbsError
    ) -> None:
        super().__init__(f"Range apply stopped at hour {failed_hour}: {cause}")
        self.failed_hour = failed_hour
        self.committed_hours = committed_hours
        self.cause = cause
