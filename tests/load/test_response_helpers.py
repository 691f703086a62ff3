"""Tests for the load test error message helpers."""

import json

import pytest
from loadtests.helpers.response import extract_error_detail, is_version_conflict


class _Response:
    def __init__(self, status_code, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text if body is None else json.dumps(body)

    def json(self):
        if self._body is None:
            raise ValueError("not json")
        return self._body


class TestExtractErrorDetail:
    def test_field_messages_are_flattened(self):
        response = _Response(400, {"error": {"separated_qty": ["Too much", "Must be positive"]}})
        assert extract_error_detail(response) == "invalid: separated_qty: Too much | separated_qty: Must be positive"

    def test_internal_fields_drop_their_name(self):
        response = _Response(503, {"error": {"_store": ["Requisition store unavailable"]}})
        assert extract_error_detail(response) == "store unavailable: Requisition store unavailable"

    def test_plain_error_string(self):
        response = _Response(404, {"error": "Requisition not found"})
        assert extract_error_detail(response) == "not found: Requisition not found"

    def test_request_validation_skips_body_prefix(self):
        response = _Response(422, {"detail": [{"loc": ["body", "expected_version"], "msg": "Field required"}]})
        assert extract_error_detail(response) == "malformed request: expected_version: Field required"

    def test_non_json_body(self):
        assert extract_error_detail(_Response(502, text="Bad Gateway")) == "502: Bad Gateway"
        assert extract_error_detail(_Response(502)) == "502: (empty response body)"


class TestIsVersionConflict:
    @pytest.mark.parametrize(
        "response, expected",
        [
            (_Response(409, {"error": {"version": ["Requisition was modified"]}}), True),
            (_Response(409, {"error": {"status": ["Cannot deliver a requisition in Pending state"]}}), False),
            (_Response(400, {"error": {"version": ["x"]}}), False),
            (_Response(409), False),
        ],
    )
    def test_detects_stale_version(self, response, expected):
        assert is_version_conflict(response) is expected
