"""
Tests for middleware components.

This module tests:
- RequestIDMiddleware (correlation ID tracking)
- LoggingMiddleware (request/response logging)
- ServerHeaderMiddleware (default Server header)
- TimeoutMiddleware (per-request timeout)

Tests follow AAA (Arrange, Act, Assert) pattern.
"""

import asyncio
import uuid
from unittest.mock import patch

import pytest
from fastapi import FastAPI, Request, Response
from fastapi.testclient import TestClient

from user_api.middleware.logging import LoggingMiddleware
from user_api.middleware.request_id import RequestIDMiddleware
from user_api.middleware.server_header import ServerHeaderMiddleware
from user_api.middleware.timeout import TimeoutMiddleware


class TestRequestIDMiddleware:
    """Tests for request ID correlation middleware."""

    def test_request_id_generated_when_missing(self):
        """
        Test that request ID is generated when not provided.

        Arrange: FastAPI app with RequestIDMiddleware
        Act: Make request without X-Request-ID header
        Assert: Response has X-Request-ID header with valid UUID
        """
        # Arrange
        app = FastAPI()
        app.add_middleware(RequestIDMiddleware)

        @app.get("/test")
        async def test_endpoint(request: Request):
            return {"request_id": request.state.request_id}

        client = TestClient(app)

        # Act
        response = client.get("/test")

        # Assert
        assert response.status_code == 200
        request_id = response.headers["X-Request-ID"]
        uuid.UUID(request_id)
        assert response.json()["request_id"] == request_id

    def test_request_id_preserved_from_header(self):
        """
        Test that existing request ID is preserved.

        Arrange: FastAPI app with RequestIDMiddleware
        Act: Make request with X-Request-ID header
        Assert: Same request ID is returned in response
        """
        # Arrange
        app = FastAPI()
        app.add_middleware(RequestIDMiddleware)

        @app.get("/test")
        async def test_endpoint(request: Request):
            return {"request_id": request.state.request_id}

        client = TestClient(app)

        # Act
        response = client.get("/test", headers={"X-Request-ID": "custom-request-id-123"})

        # Assert
        assert response.headers["X-Request-ID"] == "custom-request-id-123"
        assert response.json()["request_id"] == "custom-request-id-123"

    def test_request_id_different_per_request(self):
        # Arrange
        app = FastAPI()
        app.add_middleware(RequestIDMiddleware)

        @app.get("/test")
        async def test_endpoint():
            return {"ok": True}

        client = TestClient(app)

        # Act
        ids = {client.get("/test").headers["X-Request-ID"] for _ in range(3)}

        # Assert
        assert len(ids) == 3

    def test_empty_request_id_header_replaced(self):
        # Arrange
        app = FastAPI()
        app.add_middleware(RequestIDMiddleware)

        @app.get("/test")
        async def test_endpoint():
            return {"ok": True}

        client = TestClient(app)

        # Act
        response = client.get("/test", headers={"X-Request-ID": ""})

        # Assert
        uuid.UUID(response.headers["X-Request-ID"])


class TestLoggingMiddleware:
    """Tests for request/response logging middleware."""

    def _make_app(self) -> FastAPI:
        app = FastAPI()
        app.add_middleware(LoggingMiddleware)
        app.add_middleware(RequestIDMiddleware)

        @app.get("/test")
        async def test_endpoint():
            return {"ok": True}

        @app.get("/unavailable")
        async def unavailable_endpoint():
            return Response(status_code=500)

        @app.get("/boom")
        async def boom_endpoint():
            raise ValueError("Test exception")

        return app

    def test_logs_start_and_completion(self):
        """
        Test that logging middleware logs request details.

        Arrange: FastAPI app with both middleware, mock logger
        Act: Make request with a custom request ID
        Assert: Start and completion logged with status, latency and request ID
        """
        # Arrange
        client = TestClient(self._make_app())

        with patch('user_api.middleware.logging.logger') as mock_logger:
            # Act
            response = client.get("/test?param=value", headers={"X-Request-ID": "req-456"})

            # Assert
            assert response.status_code == 200
            messages = [c.args[0] for c in mock_logger.info.call_args_list]
            assert messages == ["Request started", "Request completed"]

            completion_extra = mock_logger.info.call_args_list[1].kwargs["extra"]
            assert completion_extra["status_code"] == 200
            assert completion_extra["request_id"] == "req-456"
            assert completion_extra["latency_ms"] >= 0

            start_extra = mock_logger.info.call_args_list[0].kwargs["extra"]
            assert start_extra["query_params"] == "param=value"

    def test_logs_exceptions(self):
        """
        Test that logging middleware logs exceptions.

        Arrange: Endpoint that raises
        Act: Make request
        Assert: Error logged with exception type, exception re-raised
        """
        # Arrange
        client = TestClient(self._make_app())

        with patch('user_api.middleware.logging.logger') as mock_logger:
            # Act
            with pytest.raises(ValueError):
                client.get("/boom")

            # Assert
            error_call = mock_logger.error.call_args_list[0]
            assert "Request failed" in error_call.args[0]
            assert error_call.kwargs["extra"]["exception_type"] == "ValueError"
            assert error_call.kwargs["exc_info"] is True


    def test_server_error_completion_logged_as_warning(self):
        # Arrange
        client = TestClient(self._make_app())

        with patch('user_api.middleware.logging.logger') as mock_logger:
            # Act
            response = client.get("/unavailable")

            # Assert
            assert response.status_code == 500
            warning_call = mock_logger.warning.call_args_list[0]
            assert warning_call.args[0] == "Request completed"
            assert warning_call.kwargs["extra"]["status_code"] == 500


class TestServerHeaderMiddleware:
    """Tests for the default Server header."""

    def test_sets_default_server_header(self):
        # Arrange
        app = FastAPI()
        app.add_middleware(ServerHeaderMiddleware, server_name="user_api")

        @app.get("/test")
        async def test_endpoint():
            return {"ok": True}

        # Act
        response = TestClient(app).get("/test")

        # Assert
        assert response.headers["server"] == "user_api"

    def test_keeps_existing_server_header(self):
        # Arrange
        app = FastAPI()
        app.add_middleware(ServerHeaderMiddleware, server_name="user_api")

        @app.get("/test")
        async def test_endpoint():
            return Response(content="ok", headers={"Server": "custom"})

        # Act
        response = TestClient(app).get("/test")

        # Assert
        assert response.headers.get_list("server") == ["custom"]


class TestTimeoutMiddleware:
    """Tests for the per-request timeout."""

    def _make_app(self, timeout_seconds: float, cancelled: list) -> FastAPI:
        app = FastAPI()
        app.add_middleware(TimeoutMiddleware, timeout_seconds=timeout_seconds)

        @app.get("/slow")
        async def slow_endpoint():
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                cancelled.append(True)
                raise
            return {"ok": True}

        @app.get("/fast")
        async def fast_endpoint():
            return {"ok": True}

        @app.get("/raises-timeout")
        async def raises_timeout_endpoint():
            raise TimeoutError("driver-level")

        return app

    def test_slow_request_gets_408_and_is_cancelled(self):
        """
        Test requests exceeding the budget are abandoned.

        Arrange: 50ms timeout, handler sleeping 5s
        Act: GET /slow
        Assert: 408, handler cancelled
        """
        # Arrange
        cancelled = []
        client = TestClient(self._make_app(0.05, cancelled))

        # Act
        response = client.get("/slow")

        # Assert
        assert response.status_code == 408
        assert cancelled == [True]

    def test_fast_request_passes_through(self):
        # Arrange
        client = TestClient(self._make_app(1.0, []))

        # Act
        response = client.get("/fast")

        # Assert
        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValueError):
            TimeoutMiddleware(FastAPI(), timeout_seconds=0)

    def test_timeout_error_from_handler_is_not_408(self):
        """
        Test a TimeoutError raised below the middleware is left alone.

        Arrange: Generous budget, handler raising TimeoutError at once
        Act: GET /raises-timeout
        Assert: 500 from the server error handler, not 408
        """
        # Arrange
        client = TestClient(self._make_app(5.0, []), raise_server_exceptions=False)

        # Act
        response = client.get("/raises-timeout")

        # Assert
        assert response.status_code == 500

    def test_timeout_error_from_handler_propagates(self):
        # Arrange
        client = TestClient(self._make_app(5.0, []))

        # Act / Assert
        with pytest.raises(TimeoutError, match="driver-level"):
            client.get("/raises-timeout")
