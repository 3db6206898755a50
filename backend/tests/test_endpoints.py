import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from config.constants import PipelineConfig
from deps import get_verification_pipeline
from exceptions import GenerationFailure, SearchFailure, VerificationFailed
from models import ImagePayload, VerificationResult

MOON_RESULT = VerificationResult(
    question="Was the 1969 moon landing faked?",
    claim="The moon landing was faked",
    validity=False,
    response="NASA archives [1] and independent tracking [2] confirm the landing.",
)


@pytest.fixture
def mock_pipeline(test_client):
    import main
    pipeline = MagicMock()
    pipeline.verify = AsyncMock(return_value=MOON_RESULT)
    main.app.dependency_overrides[get_verification_pipeline] = lambda: pipeline
    return pipeline


def upload(client, data=b"\xff\xd8fake-jpeg", **kwargs):
    return client.post("/verify-new", files={"image": ("screenshot.jpg", data, "image/jpeg")}, **kwargs)


class TestHealthCheckEndpoints:
    """Tests for the health check endpoints."""

    def test_root(self, test_client):
        response = test_client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "Snapfact" in data["message"]

    def test_legacy_health_check(self, test_client):
        response = test_client.get("/healthCheck")

        assert response.status_code == 200
        assert response.text == "Server working perfectly fine!"


class TestVerifyEndpoint:
    """Tests for the /verify-new endpoint."""

    def test_verify_successful(self, test_client, mock_pipeline):
        response = upload(test_client)

        assert response.status_code == 200
        assert response.json() == {
            "question": "Was the 1969 moon landing faked?",
            "claim": "The moon landing was faked",
            "validity": False,
            "response": "NASA archives [1] and independent tracking [2] confirm the landing.",
        }
        payload = mock_pipeline.verify.await_args.args[0]
        assert isinstance(payload, ImagePayload)
        assert payload.data == b"\xff\xd8fake-jpeg"
        assert payload.mime_type == "image/jpeg"

    def test_missing_image(self, test_client, mock_pipeline):
        response = test_client.post("/verify-new", data={"note": "no file"})

        assert response.status_code == 400
        assert response.json() == {"error": "No image uploaded"}
        mock_pipeline.verify.assert_not_awaited()

    def test_empty_image(self, test_client, mock_pipeline):
        response = upload(test_client, data=b"")

        assert response.status_code == 400
        mock_pipeline.verify.assert_not_awaited()

    @pytest.mark.parametrize("error", [
        VerificationFailed("extracting", GenerationFailure("Request timed out")),
        VerificationFailed("searching", SearchFailure("HTTP 502")),
        RuntimeError("boom"),
    ])
    def test_failures_collapse_to_generic_error(self, test_client, mock_pipeline, error):
        mock_pipeline.verify.side_effect = error

        response = upload(test_client)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to verify image"}

    def test_request_timeout(self, test_client, mock_pipeline):
        async def slow_verify(payload):
            await asyncio.sleep(5)
            return MOON_RESULT

        mock_pipeline.verify = slow_verify

        with patch("main.PIPELINE_CONFIG", PipelineConfig(REQUEST_TIMEOUT=0.05)):
            response = upload(test_client)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to verify image"}

    def test_request_id_propagated(self, test_client, mock_pipeline):
        response = upload(test_client, headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert "X-Response-Time" in response.headers

    def test_request_id_generated(self, test_client, mock_pipeline):
        response = upload(test_client)

        assert response.headers["X-Request-ID"]
