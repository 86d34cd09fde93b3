"""Tests for publisher response decoding."""

from __future__ import annotations

import pytest

from sealbot.core.storage.publisher import (
    BlobReference,
    ProtocolError,
    ResponseShape,
    decode_publisher_response,
    publisher_name,
)


class TestDecodePublisherResponse:
    """Tests for the three success shapes and their priority."""

    def test_newly_created(self):
        body = {"newlyCreated": {"blobObject": {"blobId": "new-id", "id": "0xobj"}}}
        assert decode_publisher_response(body) == BlobReference("new-id", ResponseShape.NEWLY_CREATED)

    def test_already_certified(self):
        body = {"alreadyCertified": {"blobId": "cert-id", "endEpoch": 10}}
        assert decode_publisher_response(body) == BlobReference(
            "cert-id", ResponseShape.ALREADY_CERTIFIED
        )

    def test_flat(self):
        assert decode_publisher_response({"blobId": "flat-id"}) == BlobReference(
            "flat-id", ResponseShape.FLAT
        )

    def test_newly_created_wins_over_flat(self):
        body = {"newlyCreated": {"blobObject": {"blobId": "new-id"}}, "blobId": "flat-id"}
        assert decode_publisher_response(body).blob_id == "new-id"

    def test_matched_shape_without_id_falls_through(self):
        body = {"alreadyCertified": {"blobId": ""}, "blobId": "flat-id"}
        assert decode_publisher_response(body).blob_id == "flat-id"

    def test_matched_shape_without_id(self):
        decoded = decode_publisher_response({"newlyCreated": {"blobObject": {"blobId": None}}})
        assert isinstance(decoded, ProtocolError)
        assert decoded.reason == "Blob ID missing in response"

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"status": "ok"},
            {"newlyCreated": {"blobObject": {}}},
            ["blobId"],
            "blobId",
            None,
        ],
    )
    def test_unexpected_structure(self, body):
        decoded = decode_publisher_response(body)
        assert isinstance(decoded, ProtocolError)
        assert decoded.reason == "Unexpected response structure"
        assert decoded.body == body


class TestPublisherName:
    def test_host(self):
        assert publisher_name("https://publisher.example.com/v1/blobs", 0) == "publisher.example.com"

    def test_fallback(self):
        assert publisher_name("not a url", 2) == "Publisher 3"
