from abc import ABC, abstractmethod
from typing import Any, Sequence

from models.job import ProgressResponse, TriggerResponse
from models.search_spec import SearchSpec


class BaseDatasetClient(ABC):
    """
    Abstract base class for asynchronous scrape-job APIs.
    A job is started with trigger(), watched with status() and collected with download().
    """

    @abstractmethod
    async def trigger(self, specs: Sequence[SearchSpec]) -> TriggerResponse:
        """
        Start a scrape job for a batch of searches.

        Args:
            specs: Searches to run as one job

        Returns:
            TriggerResponse carrying the request or snapshot id
        """

    @abstractmethod
    async def status(self, job_id: str) -> ProgressResponse:
        """
        Fetch the current progress of a job.

        Args:
            job_id: Handle returned by trigger()
        """

    @abstractmethod
    async def download(self, job_id: str) -> Any:
        """
        Fetch the finished job's results as JSON. The payload is returned untouched.

        Args:
            job_id: Handle returned by trigger()
        """

    async def aclose(self) -> None:
        """Release network resources. Subclasses override if they hold any."""
        return None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
