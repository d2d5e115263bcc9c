"""Bright Data dataset API client (trigger / progress / snapshot)."""

from typing import Any, Sequence

import httpx
from pydantic import ValidationError

from config.config import BrightDataSettings
from models.job import ProgressResponse, TriggerResponse
from models.search_spec import SearchSpec
from utils.logger import get_logger

from .base_client import BaseDatasetClient
from .errors import ProtocolError, TransportError

logger = get_logger(__name__)

MAX_ERROR_BODY_CHARS = 300


class BrightDataClient(BaseDatasetClient):
    """
    Thin async wrapper over the three dataset endpoints.

    Each method is a single HTTP round trip. Nothing is retried: a non-2xx
    response or a network failure raises TransportError straight away.
    """

    def __init__(self, settings: BrightDataSettings, http_client: httpx.AsyncClient | None = None):
        """
        Args:
            settings: Credential, dataset id and base URL
            http_client: Optional pre-built client (tests pass one with a MockTransport).
                         It is not closed by aclose() when supplied.
        """
        self.settings = settings
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=settings.http_timeout_s)

    def _url(self, path: str) -> str:
        return f"{self.settings.base_url.rstrip('/')}/{path.lstrip('/')}"

    async def _request(self, operation: str, method: str, path: str, **kwargs) -> Any:
        headers = dict(self.settings.auth_headers)
        headers.update(kwargs.pop("headers", {}))

        try:
            response = await self._http.request(method, self._url(path), headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(
                f"{operation} request failed: {e}",
                extra={"extra_fields": {"operation": operation, "error_type": type(e).__name__}},
            )
            raise TransportError(operation, detail=str(e)) from e

        if not response.is_success:
            body = response.text[:MAX_ERROR_BODY_CHARS]
            logger.error(
                f"{operation} returned HTTP {response.status_code}",
                extra={
                    "extra_fields": {
                        "operation": operation,
                        "status_code": response.status_code,
                        "body": body,
                    }
                },
            )
            raise TransportError(operation, status_code=response.status_code, detail=body)

        try:
            return response.json()
        except ValueError as e:
            raise ProtocolError(f"{operation} returned a body that is not JSON") from e

    async def trigger(self, specs: Sequence[SearchSpec]) -> TriggerResponse:
        logger.info(f"Triggering {len(specs)} search request(s)...")
        data = await self._request(
            "trigger",
            "POST",
            "trigger",
            params={"dataset_id": self.settings.dataset_id, "include_errors": "true"},
            json=[spec.to_payload() for spec in specs],
        )
        if not isinstance(data, dict):
            raise ProtocolError(f"trigger returned {type(data).__name__}, expected an object")

        try:
            trigger_response = TriggerResponse.model_validate(data)
        except ValidationError as e:
            raise ProtocolError(f"Unexpected trigger response: {e}") from e

        logger.info(
            "Search requests triggered successfully",
            extra={"extra_fields": {"response_keys": sorted(data.keys())}},
        )
        return trigger_response

    async def status(self, job_id: str) -> ProgressResponse:
        data = await self._request("status", "GET", f"progress/{job_id}")
        if not isinstance(data, dict):
            raise ProtocolError(f"status returned {type(data).__name__}, expected an object")

        try:
            progress = ProgressResponse.model_validate(data)
        except ValidationError as e:
            raise ProtocolError(f"Unexpected progress response: {e}") from e

        logger.debug(
            "Status response",
            extra={"extra_fields": {"job_id": job_id, "progress": data}},
        )
        return progress

    async def download(self, job_id: str) -> Any:
        data = await self._request(
            "download", "GET", f"snapshot/{job_id}", params={"format": "json"}
        )
        record_count = len(data) if isinstance(data, list) else None
        logger.info(
            "Downloaded snapshot",
            extra={"extra_fields": {"job_id": job_id, "record_count": record_count}},
        )
        return data

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()
