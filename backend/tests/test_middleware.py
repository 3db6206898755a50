import logging
import pytest

from middleware.context import RequestIdFilter, request_id_var, resolve_request_id


class TestResolveRequestId:

    def test_reuses_well_formed_id(self):
        assert resolve_request_id("req-123_abc.1") == "req-123_abc.1"

    @pytest.mark.parametrize("header", [None, "", "has space", "line\nbreak", "x" * 65])
    def test_mints_new_id_otherwise(self, header):
        request_id = resolve_request_id(header)
        assert request_id != header
        assert len(request_id) == 12


class TestRequestIdFilter:

    def _record(self) -> logging.LogRecord:
        return logging.LogRecord("config", logging.INFO, __file__, 1, "msg", None, None)

    def test_stamps_current_request_id(self):
        token = request_id_var.set("abc123")
        try:
            record = self._record()
            assert RequestIdFilter().filter(record) is True
            assert record.request_id == "abc123"
        finally:
            request_id_var.reset(token)

    def test_placeholder_outside_request(self):
        record = self._record()
        RequestIdFilter().filter(record)
        assert record.request_id == "-"


class TestRequestContextMiddleware:

    def test_malformed_header_replaced(self, test_client):
        response = test_client.get("/", headers={"X-Request-ID": "bad id with spaces"})

        assert response.status_code == 200
        assert response.headers["X-Request-ID"] != "bad id with spaces"
        assert "X-Response-Time" in response.headers
