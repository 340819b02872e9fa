"""USPTO client tests: requests.Session is stubbed; no network."""

import pytest
import requests

from prosecution_tracker.services.classification.timeline_engine import RawEvent
from prosecution_tracker.services.uspto.client import (
    InvalidApplicantNamesError,
    InvalidApplicationNumberError,
    MissingAPIKeyError,
    UpstreamAPIError,
    USPTOClient,
    normalize_transaction_record,
    parse_applicant_facets,
)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else str(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response


def _client(session, api_key="key-123"):
    return USPTOClient(api_key=api_key, base_url="https://example.test/patent/", session=session)


class TestGetTransactions:
    def test_normalizes_event_data(self):
        session = FakeSession(
            FakeResponse(
                payload={
                    "eventData": [
                        {
                            "recordEventDate": "2020-03-15",
                            "recordTransactionCode": "FEE.",
                            "recordEventDescription": "Fee Payment",
                        },
                        {"recordTransactionCode": "CTNF"},
                    ]
                }
            )
        )
        events = _client(session).get_transactions("16123456")
        assert events == [
            RawEvent("2020-03-15", "FEE.", "Fee Payment"),
            RawEvent("", "CTNF", ""),
        ]
        call = session.calls[0]
        assert call["url"] == "https://example.test/patent/applications/16123456/transactions"
        assert call["headers"]["X-API-KEY"] == "key-123"
        assert call["timeout"] == 30

    def test_missing_event_data_yields_empty_list(self):
        session = FakeSession(FakeResponse(payload={"count": 0}))
        assert _client(session).get_transactions("16123456") == []

    @pytest.mark.parametrize("number", ["", "16-123456", "16123456; DROP", "1" * 21])
    def test_invalid_application_numbers(self, number):
        session = FakeSession(FakeResponse(payload={}))
        with pytest.raises(InvalidApplicationNumberError):
            _client(session).get_transactions(number)
        assert session.calls == []

    def test_slashes_and_commas_accepted(self):
        session = FakeSession(FakeResponse(payload={"eventData": []}))
        _client(session).get_transactions("16/123,456")
        assert session.calls[0]["url"].endswith("/applications/16/123,456/transactions")

    def test_missing_api_key(self):
        session = FakeSession(FakeResponse(payload={}))
        with pytest.raises(MissingAPIKeyError) as excinfo:
            _client(session, api_key="").get_transactions("16123456")
        assert excinfo.value.code == "missing_api_key"

    def test_non_200_raises(self):
        session = FakeSession(FakeResponse(status_code=404, payload={}, text="Not Found"))
        with pytest.raises(UpstreamAPIError) as excinfo:
            _client(session).get_transactions("16123456")
        assert excinfo.value.code == "api_error"
        assert "404" in excinfo.value.message

    def test_connection_error_raises(self):
        session = FakeSession(exc=requests.ConnectionError("boom"))
        with pytest.raises(UpstreamAPIError) as excinfo:
            _client(session).get_transactions("16123456")
        assert excinfo.value.code == "api_request_failed"

    def test_invalid_json_raises(self):
        session = FakeSession(FakeResponse(payload=None, text="<html>"))
        with pytest.raises(UpstreamAPIError) as excinfo:
            _client(session).get_transactions("16123456")
        assert excinfo.value.code == "json_decode_error"


class TestSearchApplicants:
    def test_query_forwarded_verbatim(self):
        session = FakeSession(FakeResponse(payload={"facetCounts": {"firstApplicantName": []}}))
        _client(session).search_applicants("applicationMetaData.firstApplicantName:acme*")
        params = session.calls[0]["params"]
        assert params["q"] == "applicationMetaData.firstApplicantName:acme*"
        assert params["facets"] == "applicationMetaData.firstApplicantName"
        assert params["limit"] == 1

    def test_limit_and_offset_applied_to_facets(self):
        payload = {"facetCounts": {"firstApplicantName": ["A", 3, "B", 2, "C", 1]}}
        session = FakeSession(FakeResponse(payload=payload))
        names = _client(session).search_applicants("x", limit=1, offset=1)
        assert names == [{"name": "B", "count": 2}]

    def test_malformed_facet_count_is_upstream_error(self):
        payload = {"facetCounts": {"firstApplicantName": ["ACME", "n/a"]}}
        session = FakeSession(FakeResponse(payload=payload))
        with pytest.raises(UpstreamAPIError) as excinfo:
            _client(session).search_applicants("acme")
        assert excinfo.value.code == "json_decode_error"


class TestGetApplications:
    def test_query_and_listing_params(self):
        session = FakeSession(FakeResponse(payload={"results": []}))
        _client(session).get_applications("ACME CORP", limit=25, offset=50)
        call = session.calls[0]
        assert call["url"] == "https://example.test/patent/applications/search"
        params = call["params"]
        assert params["q"] == "ACME CORP"
        assert params["limit"] == 25
        assert params["offset"] == 50
        assert params["sort"] == "filingDate desc"
        assert params["fields"].split(",")[:2] == ["applicationNumberText", "filingDate"]
        assert "businessEntityStatusCategory" in params["fields"]

    def test_returns_results_records(self):
        records = [
            {"applicationNumberText": "16123456", "filingDate": "2018-04-30"},
            {"applicationNumberText": "15987654", "filingDate": "2016-01-12"},
        ]
        session = FakeSession(FakeResponse(payload={"results": records, "count": 2}))
        assert _client(session).get_applications("ACME") == records

    def test_missing_results_yields_empty_list(self):
        session = FakeSession(FakeResponse(payload={"count": 0}))
        assert _client(session).get_applications("ACME") == []

    @pytest.mark.parametrize("query", ["", "   ", None])
    def test_empty_query_rejected_without_request(self, query):
        session = FakeSession(FakeResponse(payload={"results": []}))
        with pytest.raises(InvalidApplicantNamesError) as excinfo:
            _client(session).get_applications(query)
        assert excinfo.value.code == "invalid_applicant_names"
        assert session.calls == []

    def test_non_200_raises(self):
        session = FakeSession(FakeResponse(status_code=500, text="boom"))
        with pytest.raises(UpstreamAPIError) as excinfo:
            _client(session).get_applications("ACME")
        assert excinfo.value.code == "api_error"


class TestFacetParsing:
    @pytest.mark.parametrize("payload", [
        {"facetCounts": {"firstApplicantName": ["ACME", "12", "GLOBEX", 3]}},
        {"facets": {"applicationMetaData.firstApplicantName": ["ACME", 12, "GLOBEX", 3]}},
        {
            "facet_counts": {
                "facet_fields": {"applicationMetaData.firstApplicantName": ["ACME", 12, "GLOBEX", 3]}
            }
        },
    ])
    def test_all_response_shapes(self, payload):
        assert parse_applicant_facets(payload) == [
            {"name": "ACME", "count": 12},
            {"name": "GLOBEX", "count": 3},
        ]

    def test_unpaired_trailing_name_ignored(self):
        payload = {"facetCounts": {"firstApplicantName": ["ACME", 12, "ORPHAN"]}}
        assert parse_applicant_facets(payload) == [{"name": "ACME", "count": 12}]

    @pytest.mark.parametrize("count", ["n/a", None, {"n": 1}])
    def test_non_numeric_count_raises(self, count):
        payload = {"facetCounts": {"firstApplicantName": ["ACME", count]}}
        with pytest.raises(UpstreamAPIError) as excinfo:
            parse_applicant_facets(payload)
        assert excinfo.value.code == "json_decode_error"

    def test_no_facets(self):
        assert parse_applicant_facets({"results": []}) == []


def test_normalize_handles_nulls():
    event = normalize_transaction_record(
        {"recordEventDate": None, "recordTransactionCode": "IFEE", "recordEventDescription": None}
    )
    assert event == RawEvent("", "IFEE", "")
