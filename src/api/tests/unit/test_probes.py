"""Unit tests for infrastructure probes."""

from unittest.mock import MagicMock

import pytest
import structlog

from infrastructure.observability import (
    DefaultConnectionProbe,
    DefaultStartupProbe,
    ObservationContext,
)


@pytest.fixture
def mock_logger():
    return MagicMock(spec=structlog.stdlib.BoundLogger)


class TestConnectionProbe:
    def test_default_probe_creates_with_default_logger(self):
        probe = DefaultConnectionProbe()
        assert probe._logger is not None

    def test_engine_created_logs_pool_bounds(self, mock_logger):
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.engine_created(database="botnorrea", pool_size=2, max_overflow=8)

        mock_logger.info.assert_called_once_with(
            "database_engine_created",
            database="botnorrea",
            pool_size=2,
            max_overflow=8,
        )

    def test_health_check_failed_logs_error(self, mock_logger):
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.health_check_failed(error=OSError("Connection refused"))

        mock_logger.error.assert_called_once_with(
            "database_health_check_failed",
            error="Connection refused",
            error_type="OSError",
        )

    def test_with_context_binds_context(self, mock_logger):
        probe = DefaultConnectionProbe(logger=mock_logger).with_context(
            ObservationContext(request_id="req-1")
        )

        probe.engine_disposed()

        assert isinstance(probe, DefaultConnectionProbe)
        mock_logger.info.assert_called_once_with(
            "database_engine_disposed", request_id="req-1"
        )


class TestStartupProbe:
    def test_application_started_logs_backend(self, mock_logger):
        probe = DefaultStartupProbe(logger=mock_logger)

        probe.application_started(app_name="Botnorrea API", store_backend="memory")

        mock_logger.info.assert_called_once_with(
            "application_started",
            app_name="Botnorrea API",
            store_backend="memory",
        )

    def test_with_context_keeps_probe_type(self, mock_logger):
        probe = DefaultStartupProbe(logger=mock_logger).with_context(
            ObservationContext(request_id="req-2")
        )

        probe.application_stopped(app_name="Botnorrea API")

        assert isinstance(probe, DefaultStartupProbe)
        mock_logger.info.assert_called_once_with(
            "application_stopped", app_name="Botnorrea API", request_id="req-2"
        )
