"""Orchestrators for the test and import commands."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from microcks_cli.artifacts import ArtifactReference
from microcks_cli.connectors import ConnectorError, MicrocksClient
from microcks_cli.models.result import TestResultSummary
from microcks_cli.models.test_run import TestRunRequest

log = logging.getLogger(__name__)

WARM_UP_INTERVAL = 1.0
POLL_INTERVAL = 2.0
# Added to the test timeout to cover the server side timeout handling.
DEADLINE_GRACE = 10.0


class TestRunState(StrEnum):
    """Lifecycle of a test run as seen by the polling loop."""

    __test__ = False

    CREATED = "created"
    POLLING = "polling"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"


def format_bool(value: bool) -> str:
    """Render a boolean the way the Microcks API spells it."""
    return str(value).lower()


@dataclass(frozen=True, kw_only=True)
class TestRunOrchestrator:
    """Launches a test on Microcks and waits for its outcome."""

    __test__ = False

    client: MicrocksClient
    warm_up_interval: float = WARM_UP_INTERVAL
    poll_interval: float = POLL_INTERVAL
    deadline_grace: float = DEADLINE_GRACE

    async def run_test(self, request: TestRunRequest) -> int:
        """Create the test, poll until it completes or times out.

        Args:
            request: Test to launch

        Returns:
            0 if the test completed successfully, 1 otherwise

        """
        try:
            test_result_id = await self.client.create_test_result(request)
        except ConnectorError as exc:
            print(f"Got error when invoking Microcks client creating Test: {exc}")
            return 1
        log.info("Created test result %s", test_result_id)

        try:
            state, summary = await self.wait_for_result(
                test_result_id, request.timeout
            )
        except ConnectorError as exc:
            print(f"Got error when invoking Microcks client check TestResult: {exc}")
            return 1

        if state is TestRunState.TIMED_OUT:
            log.warning("Test %s still in progress at deadline", test_result_id)

        print(
            "Full TestResult details are available here: "
            f"{self.client.test_result_url(test_result_id)}"
        )

        success = summary is not None and summary.success
        return 0 if success else 1

    async def wait_for_result(
        self, test_result_id: str, timeout_millis: int
    ) -> tuple[TestRunState, TestResultSummary | None]:
        """Poll the test result until it is no longer in progress.

        Polling starts after the warm-up interval so the server has registered
        the test, and stops once ``timeout_millis`` plus the grace delay have
        elapsed.

        Returns:
            Final state and last fetched summary (None if never fetched)

        """
        state = TestRunState.CREATED
        summary: TestResultSummary | None = None

        await asyncio.sleep(self.warm_up_interval)

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout_millis / 1000 + self.deadline_grace
        state = TestRunState.POLLING

        while state is TestRunState.POLLING:
            if loop.time() >= deadline:
                state = TestRunState.TIMED_OUT
                break

            summary = await self.client.get_test_result(test_result_id)
            print(
                f'MicrocksClient got status for test "{test_result_id}" - '
                f"success: {format_bool(summary.success)}, "
                f"inProgress: {format_bool(summary.in_progress)}"
            )

            if not summary.in_progress:
                state = TestRunState.COMPLETED
                break

            print(
                f"MicrocksTester waiting for {self.poll_interval:g} seconds "
                "before checking again or exiting."
            )
            await asyncio.sleep(self.poll_interval)

        return state, summary


@dataclass(frozen=True, kw_only=True)
class ImportOrchestrator:
    """Uploads artifacts one after the other, stopping at the first failure."""

    client: MicrocksClient

    async def run_import(self, artifacts: Sequence[ArtifactReference]) -> int:
        """Upload artifacts in order.

        Returns:
            0 if every artifact was uploaded, 1 at the first failure

        """
        for artifact in artifacts:
            log.info(
                "Uploading %s (main artifact: %s)", artifact.path, artifact.is_primary
            )
            try:
                service = await self.client.upload_artifact(
                    artifact.path, artifact.is_primary
                )
            except ConnectorError as exc:
                print(
                    f"Got error when invoking Microcks client importing Artifact: {exc}"
                )
                return 1
            print(f"Microcks has discovered '{service}'")

        return 0
