"""Error taxonomy for reviewer-side operations.

- input problems are raised before any network call
- transport problems cover network failures and non-2xx responses
- response problems (bad JSON, unexpected shape) are a kind of transport problem
"""

from __future__ import annotations


class PortalClientError(Exception):
    """Base class for every reviewer-side failure."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InputValidationError(PortalClientError):
    """Caller input rejected locally; nothing was sent."""


class ActionValidationError(InputValidationError):
    """A review action was malformed or is not allowed for the request."""


class SessionRequiredError(PortalClientError):
    """No validated reviewer is signed in; the caller should go to login."""


class SessionRejectedError(PortalClientError):
    """The portal does not recognise the username."""


class PortalTransportError(PortalClientError):
    """Network failure or non-2xx response from the portal."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PortalResponseError(PortalTransportError):
    """The portal answered with a body that is not JSON or not the documented shape."""


class ActionFailedError(PortalClientError):
    """The portal did not apply a review action; local state is unchanged."""

    def __init__(self, message: str, *, request_ids: tuple[int, ...] = ()) -> None:
        super().__init__(message)
        self.request_ids = request_ids


class DashboardLoadError(PortalClientError):
    """Both the request list and the reportee list failed to load."""

    def __init__(
        self,
        *,
        requests_error: PortalClientError,
        reportees_error: PortalClientError,
    ) -> None:
        super().__init__(
            f"Requests: {requests_error.message}; reportees: {reportees_error.message}",
        )
        self.requests_error = requests_error
        self.reportees_error = reportees_error
