"""
SearchOrchestrator - trigger a batch of searches, wait for the snapshot, hand back the results.

Key guarantees:
- One batch is one job: trigger, poll, download, strictly in that order
- Every failure propagates to the caller; there is no partial result
- Saving is the caller's choice and never raises
"""

import asyncio
import concurrent.futures
from pathlib import Path
from typing import Any, Sequence

from api.base_client import BaseDatasetClient
from api.errors import ProtocolError
from models.search_spec import SearchSpec
from orchestrator.poller import PollPolicy, wait_for_results
from utils.logger import get_logger
from utils.result_writer import save_results

logger = get_logger(__name__)


class SearchOrchestrator:
    def __init__(self, client: BaseDatasetClient, poll_policy: PollPolicy | None = None):
        """
        Args:
            client: Dataset API client
            poll_policy: Poll interval and wait budget (defaults: 10s / 300s)
        """
        self.client = client
        self.poll_policy = poll_policy or PollPolicy()

    async def search_engines(self, specs: Sequence[SearchSpec]) -> Any:
        """
        Run one batch of searches as a single scrape job.

        Args:
            specs: Searches to submit together

        Returns:
            The provider's result payload

        Raises:
            TransportError: any HTTP call failed
            ProtocolError: the trigger response carried neither request_id nor snapshot_id
            JobFailedError: the provider reported the job as failed
            JobTimeoutError: the job did not finish within the wait budget
        """
        try:
            trigger_response = await self.client.trigger(specs)

            job_id = trigger_response.job_id
            if not job_id:
                raise ProtocolError("No request ID or snapshot ID received from trigger")

            logger.info(f"Snapshot ID: {job_id}", extra={"extra_fields": {"job_id": job_id}})
            return await wait_for_results(self.client, job_id, self.poll_policy)
        except asyncio.CancelledError:
            logger.warning("Search cancelled")
            raise
        except Exception as e:
            logger.error(
                f"Error in search_engines: {e}",
                extra={"extra_fields": {"error_type": type(e).__name__, "search_count": len(specs)}},
            )
            raise

    async def search_and_save(
        self,
        specs: Sequence[SearchSpec],
        filename: str | Path | None = None,
        prefix: str = "search_results",
    ) -> Any:
        """Run search_engines() and write the payload to disk. Returns the payload."""
        results = await self.search_engines(specs)
        save_results(results, filename, prefix=prefix)
        return results

    def search_engines_sync(self, specs: Sequence[SearchSpec]) -> Any:
        """
        Synchronous wrapper for search_engines.

        Handles the case where an event loop is already running by
        executing in a separate thread with its own loop.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.search_engines(specs))
        return self._run_in_new_thread(specs)

    def _run_in_new_thread(self, specs: Sequence[SearchSpec]) -> Any:
        """
        Run the async search in a new thread with its own event loop.

        Used when called from within an existing event loop.
        """
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as executor:
            future = executor.submit(asyncio.run, self.search_engines(specs))
            return future.result()
