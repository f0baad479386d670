"""Tests for domain entities."""

import base64

import pytest
from pydantic import ValidationError

from smlt.entities import (
    BackendEndpoint,
    Credentials,
    OutcomeStatus,
    SimilarDocument,
    SimilarityMode,
    SimilarityOutcome,
    SimilarityRequest,
    SimilarityResult,
)


def test_request_defaults():
    """Test that only document and site are required."""
    request = SimilarityRequest(document_id="page-42", site_root_id=1)

    assert request.language_id == 0
    assert request.count == 5
    assert request.mode == "hybrid"
    assert request.vector_weight == 0.7
    assert request.mlt_weight == 0.3
    assert request.known_mode


def test_request_is_immutable():
    request = SimilarityRequest(document_id="page-42", site_root_id=1)

    with pytest.raises(ValidationError):
        request.count = 10


def test_request_empty_document_id_fails():
    """Test that empty document ID raises validation error."""
    with pytest.raises(ValueError, match="Document ID cannot be empty"):
        SimilarityRequest(document_id="   ", site_root_id=1)


def test_request_negative_count_fails():
    with pytest.raises(ValidationError):
        SimilarityRequest(document_id="page-42", site_root_id=1, count=-1)


@pytest.mark.parametrize("mode", [None, "", "  "])
def test_request_blank_mode_defaults_to_hybrid(mode):
    request = SimilarityRequest(document_id="page-42", site_root_id=1, mode=mode)
    assert request.mode == "hybrid"


def test_request_accepts_mode_enum():
    request = SimilarityRequest(document_id="page-42", site_root_id=1, mode=SimilarityMode.MLT_ONLY)
    assert request.mode == "mlt_only"


def test_request_keeps_unknown_mode():
    """Test that unknown modes are passed through, not rejected."""
    request = SimilarityRequest(document_id="page-42", site_root_id=1, mode="semantic_plus")

    assert request.mode == "semantic_plus"
    assert not request.known_mode


def test_request_weights_not_clamped():
    request = SimilarityRequest(document_id="page-42", site_root_id=1, vector_weight=1.5, mlt_weight=-0.2)

    assert request.vector_weight == 1.5
    assert request.mlt_weight == -0.2


def test_endpoint_strips_trailing_slash():
    endpoint = BackendEndpoint(base_uri="http://solr:8983/solr/core_en///")
    assert endpoint.base_uri == "http://solr:8983/solr/core_en"


def test_endpoint_empty_uri_fails():
    with pytest.raises(ValidationError):
        BackendEndpoint(base_uri="/")


def test_endpoint_basic_auth_header():
    endpoint = BackendEndpoint(
        base_uri="http://solr",
        credentials=Credentials(username="user", password="pass"),
    )

    expected = "Basic " + base64.b64encode(b"user:pass").decode("ascii")
    assert endpoint.basic_auth_header() == expected


@pytest.mark.parametrize(
    "credentials",
    [
        None,
        Credentials(username="user"),
        Credentials(password="pass"),
        Credentials(),
    ],
)
def test_endpoint_no_auth_header_without_full_credentials(credentials):
    endpoint = BackendEndpoint(base_uri="http://solr", credentials=credentials)
    assert endpoint.basic_auth_header() is None


def test_endpoint_empty_password_still_counts():
    """Test that an empty (but present) password still sends auth."""
    endpoint = BackendEndpoint(
        base_uri="http://solr",
        credentials=Credentials(username="user", password=""),
    )

    assert endpoint.basic_auth_header() == "Basic " + base64.b64encode(b"user:").decode("ascii")


def test_empty_result():
    result = SimilarityResult.empty("page-42", "vector_only")

    assert result.source_id == "page-42"
    assert result.mode == "vector_only"
    assert result.num_found == 0
    assert result.docs == []
    assert result.is_empty
    assert result.to_payload() == {
        "sourceId": "page-42",
        "mode": "vector_only",
        "numFound": 0,
        "docs": [],
    }


def test_result_from_backend_payload_keeps_order_and_unknown_fields():
    result = SimilarityResult.model_validate(
        {
            "sourceId": "page-42",
            "mode": "hybrid",
            "numFound": 2,
            "docs": [
                {"id": "b", "title": "Second", "score": 0.9, "url": "/b", "author": "x"},
                {"id": "a", "scoreBreakdown": {"vectorScore": 0.5, "mltScore": 0.2, "combinedScore": 0.41}},
            ],
        }
    )

    assert [doc.id for doc in result.docs] == ["b", "a"]
    assert result.docs[0].numeric_score == 0.9
    assert result.docs[1].breakdown.mlt_score == 0.2

    payload = result.to_payload()
    assert payload["docs"][0] == {"id": "b", "title": "Second", "score": 0.9, "url": "/b", "author": "x"}
    assert payload["docs"][1] == {
        "id": "a",
        "scoreBreakdown": {"vectorScore": 0.5, "mltScore": 0.2, "combinedScore": 0.41},
    }


def test_document_values_round_trip_unchanged():
    raw = {"id": 17, "title": ["Main", "Alternate"], "url": "/x", "score": "0.5", "keywords": ["a"]}

    doc = SimilarDocument.model_validate(raw)

    assert doc.id == 17
    assert doc.to_payload() == raw


def test_document_numeric_score():
    assert SimilarDocument(score=1).numeric_score == 1.0
    assert SimilarDocument(score="0.5").numeric_score is None
    assert SimilarDocument(score=True).numeric_score is None
    assert SimilarDocument().numeric_score is None


def test_document_unparseable_breakdown_is_kept_raw():
    doc = SimilarDocument.model_validate({"id": "a", "scoreBreakdown": {"vectorScore": "high"}})

    assert doc.breakdown is None
    assert doc.to_payload() == {"id": "a", "scoreBreakdown": {"vectorScore": "high"}}


def test_result_negative_num_found_fails():
    with pytest.raises(ValidationError):
        SimilarityResult.model_validate({"sourceId": "x", "mode": "hybrid", "numFound": -3, "docs": []})


def test_outcome_success_statuses():
    found = SimilarityOutcome.success(
        SimilarityResult.model_validate({"sourceId": "x", "mode": "hybrid", "numFound": 1, "docs": [{"id": "a"}]})
    )
    nothing = SimilarityOutcome.success(SimilarityResult.empty("x", "hybrid"))

    assert found.status == OutcomeStatus.FOUND
    assert nothing.status == OutcomeStatus.NO_MATCHES
    assert found.ok and nothing.ok
    assert not found.degraded and not nothing.degraded


def test_outcome_fallback_is_degraded():
    outcome = SimilarityOutcome.fallback(
        OutcomeStatus.STATUS_FAILURE, "page-42", "hybrid", status_code=503, error="HTTP 503"
    )

    assert outcome.degraded
    assert outcome.status_code == 503
    assert outcome.result == SimilarityResult.empty("page-42", "hybrid")
