"""Poll a scrape job until it finishes, fails or runs out of time."""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from api.base_client import BaseDatasetClient
from api.errors import JobFailedError, JobTimeoutError
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_POLL_INTERVAL_S = 10.0
DEFAULT_MAX_WAIT_S = 300.0


@dataclass(frozen=True)
class PollPolicy:
    """
    Timing for the poll loop.

    sleep and clock are injectable so the loop can be driven without real delays.
    """

    interval_s: float = DEFAULT_POLL_INTERVAL_S
    max_wait_s: float = DEFAULT_MAX_WAIT_S
    sleep: Callable[[float], Awaitable[Any]] = field(default=asyncio.sleep, compare=False)
    clock: Callable[[], float] = field(default=time.monotonic, compare=False)


async def wait_for_results(
    client: BaseDatasetClient,
    job_id: str,
    policy: PollPolicy | None = None,
) -> Any:
    """
    Wait for a job to reach a terminal status and return its downloaded results.

    completed/ready download once and return the payload. failed raises
    JobFailedError without further calls. Any other status sleeps one interval
    and checks again until max_wait_s has elapsed, then raises JobTimeoutError.

    The coroutine is cancellable at every await; cancelling it leaves the job
    running at the provider.

    Args:
        client: API client used for status and download calls
        job_id: Handle returned by the trigger call
        policy: Interval and wait budget (defaults: 10s / 300s)

    Returns:
        The provider's result payload, unmodified
    """
    policy = policy or PollPolicy()
    start = policy.clock()
    checks = 0
    last_status: str | None = None

    while policy.clock() - start < policy.max_wait_s:
        checks += 1
        logger.info("Checking status...", extra={"extra_fields": {"job_id": job_id, "check": checks}})
        progress = await client.status(job_id)
        status = progress.job_status
        last_status = progress.status

        if status.is_success:
            logger.info(
                "Search completed! Downloading results...",
                extra={"extra_fields": {"job_id": job_id, "status": last_status, "checks": checks}},
            )
            return await client.download(job_id)

        if status.is_failure:
            logger.error(
                "Search failed",
                extra={"extra_fields": {"job_id": job_id, "progress": progress.model_dump()}},
            )
            raise JobFailedError(job_id, progress.model_dump())

        logger.info(f"Status: {last_status}. Waiting {policy.interval_s:g} seconds...")
        await policy.sleep(policy.interval_s)

    waited = policy.clock() - start
    logger.error(
        "Timeout waiting for results",
        extra={
            "extra_fields": {
                "job_id": job_id,
                "waited_s": round(waited, 3),
                "last_status": last_status,
                "checks": checks,
            }
        },
    )
    raise JobTimeoutError(job_id, waited, last_status)
