"""Models for test run results."""

from pydantic import Field

from microcks_cli.models.base import Model


class TestResultSummary(Model):
    """Status of a test run as returned by Microcks.

    Only ``success`` and ``in_progress`` drive the polling; the other fields
    are informational.
    """

    __test__ = False

    id: str
    success: bool = False
    in_progress: bool = False
    test_date: int | None = None
    tested_endpoint: str | None = None
    service_id: str | None = None
    elapsed_time: int | None = Field(default=None, description="Duration in millis")
