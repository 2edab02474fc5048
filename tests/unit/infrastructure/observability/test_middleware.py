"""Unit tests for RequestLoggingMiddleware."""

from unittest.mock import patch

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from starlette.middleware.base import BaseHTTPMiddleware

from neometing.infrastructure.observability.middleware import RequestLoggingMiddleware


class TestRequestLoggingMiddleware:
    """Test suite for RequestLoggingMiddleware."""

    @pytest.fixture
    def app(self) -> FastAPI:
        """Create a FastAPI app with middleware for testing."""
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware, log_query_params=False)

        @app.get("/test")
        async def test_endpoint():
            return {"message": "test"}

        @app.get("/missing")
        async def missing_endpoint():
            raise HTTPException(status_code=404, detail="nope")

        @app.get("/error")
        async def error_endpoint():
            raise ValueError("Test error")

        return app

    @pytest.fixture
    def client(self, app: FastAPI) -> TestClient:
        """Create a test client."""
        return TestClient(app)

    def test_middleware_initialization_default(self):
        """Test middleware initialization with default parameters."""
        app = FastAPI()
        middleware = RequestLoggingMiddleware(app=app)

        assert middleware.log_query_params is False
        assert isinstance(middleware, BaseHTTPMiddleware)

    def test_middleware_initialization_with_logging(self):
        """Test middleware initialization with query string logging enabled."""
        middleware = RequestLoggingMiddleware(app=FastAPI(), log_query_params=True)

        assert middleware.log_query_params is True

    def test_query_params_logged_when_enabled(self):
        """Test the query string is added to the log record only when enabled."""
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware, log_query_params=True)

        @app.get("/search")
        async def search_endpoint():
            return []

        with patch(
            "neometing.infrastructure.observability.middleware.logger"
        ) as mock_logger:
            TestClient(app).get("/search", params={"limit": 10})

            extra = mock_logger.info.call_args_list[0][1]["extra"]
            assert extra["query_params"] == "limit=10"

    def test_query_params_not_logged_by_default(self, client: TestClient):
        """Test the query string stays out of the log record by default."""
        with patch(
            "neometing.infrastructure.observability.middleware.logger"
        ) as mock_logger:
            client.get("/test", params={"limit": 10})

            extra = mock_logger.info.call_args_list[0][1]["extra"]
            assert "query_params" not in extra

    def test_successful_request_logs_completion(self, client: TestClient):
        """Test that successful requests log completion with status and duration."""
        with patch(
            "neometing.infrastructure.observability.middleware.logger"
        ) as mock_logger:
            response = client.get("/test")

            assert response.status_code == 200
            assert response.json() == {"message": "test"}

            # Middleware logs once per request (completion only)
            assert mock_logger.info.call_count == 1

            # "✓ GET /test → 200 (Xms)"
            log_message = mock_logger.info.call_args_list[0][0][0]
            assert log_message.startswith("✓ GET /test")
            assert "200" in log_message
            assert "ms" in log_message

    def test_error_status_marked(self, client: TestClient):
        """Test 4xx responses get the failure mark."""
        with patch(
            "neometing.infrastructure.observability.middleware.logger"
        ) as mock_logger:
            response = client.get("/missing")

            assert response.status_code == 404
            log_message = mock_logger.info.call_args_list[0][0][0]
            assert log_message.startswith("✗ GET /missing")

    def test_request_with_correlation_id_header(self, client: TestClient):
        """Test request with X-Correlation-ID header."""
        with (
            patch(
                "neometing.infrastructure.observability.middleware.set_correlation_id"
            ) as mock_set_correlation_id,
            patch(
                "neometing.infrastructure.observability.middleware.get_correlation_id",
                return_value="test-correlation-id",
            ),
        ):
            response = client.get(
                "/test", headers={"X-Correlation-ID": "custom-correlation-id"}
            )

            assert response.status_code == 200
            mock_set_correlation_id.assert_called_once_with("custom-correlation-id")
            assert response.headers["X-Correlation-ID"] == "test-correlation-id"

    def test_request_without_correlation_id_header(self, client: TestClient):
        """Test request without X-Correlation-ID header generates one."""
        response = client.get("/test")

        assert response.status_code == 200
        assert len(response.headers["X-Correlation-ID"]) == 36

    def test_unhandled_exception_logged_and_reraised(self, app: FastAPI):
        """Test unhandled exceptions are logged and propagate."""
        client = TestClient(app, raise_server_exceptions=True)
        with patch(
            "neometing.infrastructure.observability.middleware.logger"
        ) as mock_logger:
            with pytest.raises(ValueError, match="Test error"):
                client.get("/error")

            mock_logger.exception.assert_called_once()
