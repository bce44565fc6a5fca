"""Tests for record models."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from shapleyad.attribution.models import Record, RecordInput, coerce_count


class TestCoerceCount:

    @pytest.mark.parametrize("value,expected", [
        (7, 7),
        (-3, -3),
        (12.0, 12),
        (" 42 ", 42),
        ("12abc", 0),
        ("3.7", 0),
        ("", 0),
        (1.5, 0),
        (float("nan"), 0),
        (True, 0),
        (None, 0),
        ({"n": 1}, 0),
    ])
    def test_lenient_parsing(self, value, expected):
        assert coerce_count(value) == expected


class TestRecordInput:

    def test_defaults(self):
        ri = RecordInput(campaign="c")
        assert (ri.impressions, ri.clicks, ri.conversions) == (0, 0, 0)

    def test_form_strings_coerced(self):
        ri = RecordInput(campaign="c", impressions="100", clicks="x", conversions="3")
        assert (ri.impressions, ri.clicks, ri.conversions) == (100, 0, 3)


class TestRecord:

    def _record(self, **overrides):
        fields = dict(
            id="r1", payload="blob", timestamp=1, advertiser="a", campaign="c",
            impressions=1, clicks=1, conversions=1, contribution_score=0.4,
        )
        fields.update(overrides)
        return Record(**fields)

    def test_frozen(self):
        record = self._record()
        with pytest.raises(PydanticValidationError):
            record.clicks = 5

    def test_negative_counters_invalid(self):
        with pytest.raises(PydanticValidationError):
            self._record(impressions=-1)

    def test_accepts_wire_aliases(self):
        record = Record(
            id="r1", data="blob", timestamp=1, advertiser="a", campaign="c",
            contributionScore=0.5,
        )
        assert record.payload == "blob"
        assert record.contribution_score == 0.5

    def test_document_uses_wire_names_without_id(self):
        doc = self._record().document()
        assert "id" not in doc
        assert doc["data"] == "blob"
        assert doc["contributionScore"] == 0.4
