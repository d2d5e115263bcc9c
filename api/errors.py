"""Exception hierarchy for the search collector.

Everything except WriteError is raised to the caller. WriteError only exists
so a failed save can be logged with the same shape as the other failures.
"""

from typing import Any


class SerpCollectorError(Exception):
    """Base class for all collector failures."""


class ConfigurationError(SerpCollectorError):
    """API credential missing or still set to a placeholder."""


class TransportError(SerpCollectorError):
    """
    An HTTP call returned a non-2xx status or never got a response.

    status_code is None when the request failed below HTTP (DNS, connect, read timeout).
    """

    def __init__(self, operation: str, status_code: int | None = None, detail: str = ""):
        self.operation = operation
        self.status_code = status_code
        self.detail = detail
        if status_code is not None:
            message = f"{operation} failed: HTTP error! status: {status_code}"
        else:
            message = f"{operation} failed: {detail or 'no response'}"
        super().__init__(message)


class ProtocolError(SerpCollectorError):
    """The provider answered with a body that does not match its contract."""


class JobFailedError(SerpCollectorError):
    """The provider reported the job as failed."""

    def __init__(self, job_id: str, progress: dict[str, Any] | None = None):
        self.job_id = job_id
        self.progress = progress or {}
        super().__init__("Search failed")


class JobTimeoutError(SerpCollectorError, TimeoutError):
    """The job did not reach a terminal status within the wait budget."""

    def __init__(self, job_id: str, waited_s: float, last_status: str | None = None):
        self.job_id = job_id
        self.waited_s = waited_s
        self.last_status = last_status
        super().__init__("Timeout waiting for results")


class WriteError(SerpCollectorError):
    """Saving results to disk failed. Logged, never raised to callers."""

    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Error saving results to {path}: {cause}")
