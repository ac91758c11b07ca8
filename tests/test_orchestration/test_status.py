"""
Tests for curator.orchestration.status
========================================

Every failure maps to a short status line; auth messages pass through.
"""

import pytest

from curator.core.enums import PublishStage
from curator.core.exceptions import (
    AuthError,
    CodecError,
    ConflictError,
    DescriberError,
    NetworkError,
    NotFoundError,
    PublishInFlightError,
    StoreError,
)
from curator.orchestration import status


class TestStageStatus:
    """stage_status() for each PublishStage."""

    def test_upload_stage(self) -> None:
        assert status.stage_status(PublishStage.UPLOAD_BINARY) == "Uploading to Archives..."

    @pytest.mark.parametrize(
        "stage",
        [PublishStage.FETCH_MANIFEST, PublishStage.MERGE, PublishStage.COMMIT_MANIFEST],
    )
    def test_catalogue_stages(self, stage: PublishStage) -> None:
        assert status.stage_status(stage) == "Updating Catalogue..."

    def test_complete(self) -> None:
        assert status.stage_status(PublishStage.COMPLETE) == "Published Successfully"


class TestDescribeFailure:
    """describe_failure() for each error type."""

    def test_auth_message_verbatim(self) -> None:
        """The store's auth message is shown as-is."""
        assert status.describe_failure(AuthError("Bad credentials")) == "Bad credentials"

    def test_conflict(self) -> None:
        assert "changed" in status.describe_failure(ConflictError("stale"))

    def test_not_found(self) -> None:
        assert "not found" in status.describe_failure(NotFoundError("Not Found"))

    def test_timeout_vs_unreachable(self) -> None:
        """Timeouts and unreachable stores read differently."""
        timeout = status.describe_failure(NetworkError("t", error_code="STORE_TIMEOUT"))
        unreachable = status.describe_failure(NetworkError("u"))
        assert "in time" in timeout
        assert timeout != unreachable

    def test_codec(self) -> None:
        assert "unreadable" in status.describe_failure(CodecError("bad json"))

    def test_in_flight(self) -> None:
        assert "already in progress" in status.describe_failure(PublishInFlightError())

    def test_describer(self) -> None:
        assert status.describe_failure(DescriberError("boom")) == status.DESCRIBE_FAILED

    def test_other_curator_error_uses_message(self) -> None:
        assert status.describe_failure(StoreError("Server Error", status_code=500)) == "Server Error"

    def test_foreign_exception(self) -> None:
        assert status.describe_failure(RuntimeError("x")) == status.GENERIC_FAILURE
