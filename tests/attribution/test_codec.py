"""Tests for record encoding and tolerant decoding."""

import json

import pytest

from shapleyad.attribution.codec import decode, encode
from shapleyad.attribution.errors import DecodeError, DecodeErrorKind
from shapleyad.attribution.models import Record

DEEPLY_NESTED = b"[" * 100_000 + b"]" * 100_000


def _record(**overrides) -> Record:
    fields = dict(
        id="1700000000000-abc1234",
        payload="FHE-eyJ4IjoxfQ==",
        timestamp=1700000000,
        advertiser="5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY",
        campaign="Spring Sale",
        impressions=1000,
        clicks=40,
        conversions=7,
        contribution_score=0.121,
    )
    fields.update(overrides)
    return Record(**fields)


def _doc(**fields) -> bytes:
    return json.dumps(fields).encode("utf-8")


class TestEncode:

    def test_wire_field_names(self):
        doc = json.loads(encode(_record()).decode("utf-8"))
        assert set(doc) == {
            "data", "timestamp", "advertiser", "campaign",
            "impressions", "clicks", "conversions", "contributionScore",
        }
        assert doc["data"] == "FHE-eyJ4IjoxfQ=="
        assert doc["contributionScore"] == 0.121

    def test_id_not_in_document(self):
        assert b"1700000000000-abc1234" not in encode(_record())

    def test_deterministic(self):
        assert encode(_record()) == encode(_record())

    def test_non_ascii_campaign_is_utf8(self):
        raw = encode(_record(campaign="Été €"))
        assert "Été €".encode("utf-8") in raw


class TestRoundTrip:

    @pytest.mark.parametrize("overrides", [
        {},
        {"impressions": 0, "clicks": 0, "conversions": 0, "contribution_score": 0.0},
        {"contribution_score": 2.6, "campaign": "", "payload": ""},
        {"campaign": "Ünïcødé ✓", "contribution_score": 1 / 3},
    ])
    def test_decode_inverts_encode(self, overrides):
        record = _record(**overrides)
        result = decode(encode(record), record.id)
        assert result.ok
        assert result.record == record


class TestTolerantDecode:

    def test_missing_counters_default_to_zero(self):
        raw = _doc(timestamp=1, advertiser="a", campaign="c")
        result = decode(raw, "r1")
        assert result.ok
        rec = result.record
        assert (rec.impressions, rec.clicks, rec.conversions) == (0, 0, 0)
        assert rec.contribution_score == 0.0
        assert rec.payload == ""

    def test_string_counters_normalised(self):
        raw = _doc(
            timestamp=1, advertiser="a", campaign="c",
            impressions="120", clicks="9", conversions=2.0, contributionScore="0.5",
        )
        rec = decode(raw, "r1").record
        assert (rec.impressions, rec.clicks, rec.conversions) == (120, 9, 2)
        assert rec.contribution_score == 0.5

    def test_unparseable_counters_become_zero(self):
        raw = _doc(
            timestamp=1, advertiser="a", campaign="c",
            impressions="lots", clicks=None, conversions=[1], contributionScore="high",
        )
        rec = decode(raw, "r1").record
        assert (rec.impressions, rec.clicks, rec.conversions) == (0, 0, 0)
        assert rec.contribution_score == 0.0

    def test_negative_counters_become_zero(self):
        rec = decode(_doc(timestamp=1, advertiser="a", campaign="c", clicks=-4), "r1").record
        assert rec.clicks == 0

    def test_float_timestamp_truncated(self):
        rec = decode(_doc(timestamp=1700000000.9, advertiser="a", campaign="c"), "r1").record
        assert rec.timestamp == 1700000000

    def test_record_id_comes_from_caller(self):
        rec = decode(_doc(timestamp=1, advertiser="a", campaign="c"), "my-id").record
        assert rec.id == "my-id"


class TestMalformed:

    @pytest.mark.parametrize("raw", [
        b"",
        b"not json at all",
        b"\xff\xfe\x00garbage",
        b"[1, 2, 3]",
        b"\"just a string\"",
        b"{\"timestamp\": 1, \"advertiser\": \"a\"",
        DEEPLY_NESTED,
    ])
    def test_garbage_yields_malformed(self, raw):
        result = decode(raw, "bad")
        assert not result.ok
        assert result.record is None
        assert isinstance(result.error, DecodeError)
        assert result.error.kind == DecodeErrorKind.MALFORMED

    @pytest.mark.parametrize("missing", ["advertiser", "campaign", "timestamp"])
    def test_required_field_missing(self, missing):
        fields = {"timestamp": 1, "advertiser": "a", "campaign": "c"}
        del fields[missing]
        result = decode(_doc(**fields), "r1")
        assert not result.ok
        assert missing in result.error.detail

    def test_wrong_typed_required_fields(self):
        assert not decode(_doc(timestamp="yesterday", advertiser="a", campaign="c"), "r1").ok
        assert not decode(_doc(timestamp=True, advertiser="a", campaign="c"), "r1").ok
        assert not decode(_doc(timestamp=1, advertiser=42, campaign="c"), "r1").ok

    def test_empty_record_id_is_malformed(self):
        result = decode(_doc(timestamp=1, advertiser="a", campaign="c"), "")
        assert not result.ok
        assert result.record_id == ""
