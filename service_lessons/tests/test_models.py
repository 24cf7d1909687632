"""
Unit tests for lesson paths and content models.
"""

import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_lessons.app.models import (
    LessonPath, ManyContent, SingleContent, parse_content_result
)
from shared.errors import MissingParameterError, TransportError, ValidationError


class TestLessonPath:
    """Test cases for LessonPath."""

    def test_canonical_single_segment(self):
        assert LessonPath.from_segments("en").canonical == "/en"

    def test_canonical_full_path(self):
        path = LessonPath.from_segments("en", "2024-q1", "01", "01.md", depth=4)
        assert path.canonical == "/en/2024-q1/01/01.md"
        assert path.segments == ["en", "2024-q1", "01", "01.md"]
        assert str(path) == "/en/2024-q1/01/01.md"

    @pytest.mark.parametrize("raw", ["en/2024-q1", "/en/2024-q1", "en/2024-q1/", "//en//2024-q1/"])
    def test_parse_normalizes_separators(self, raw):
        assert LessonPath.parse(raw).canonical == "/en/2024-q1"

    def test_missing_segment_names_parameter(self):
        with pytest.raises(MissingParameterError) as exc_info:
            LessonPath.from_segments("en", "  ", depth=2)

        assert exc_info.value.missing == ["quarter"]
        assert exc_info.value.message == "Missing required parameters: quarter"
        assert exc_info.value.status_code == 400

    def test_missing_several_segments(self):
        with pytest.raises(MissingParameterError) as exc_info:
            LessonPath.from_segments("en", None, None, "01.md", depth=4)

        assert exc_info.value.missing == ["quarter", "lesson"]

    def test_missing_language(self):
        with pytest.raises(MissingParameterError) as exc_info:
            LessonPath.from_segments(None)

        assert exc_info.value.missing == ["language"]

    def test_parse_empty_path(self):
        with pytest.raises(MissingParameterError):
            LessonPath.parse("/")

    def test_parse_too_many_segments(self):
        with pytest.raises(ValidationError) as exc_info:
            LessonPath.parse("en/2024-q1/01/01.md/extra")

        assert not isinstance(exc_info.value, MissingParameterError)

    def test_segments_past_depth_are_dropped(self):
        path = LessonPath.from_segments("en", "2024-q1", "01", depth=2)
        assert path.canonical == "/en/2024-q1"

    @pytest.mark.parametrize("language", ["", "   "])
    def test_direct_construction_rejects_blank_language(self, language):
        with pytest.raises(MissingParameterError) as exc_info:
            LessonPath(language)

        assert exc_info.value.missing == ["language"]

    def test_direct_construction_rejects_gaps(self):
        with pytest.raises(MissingParameterError) as exc_info:
            LessonPath("en", None, "01")

        assert exc_info.value.missing == ["quarter"]

    def test_direct_construction_strips_segments(self):
        path = LessonPath(" en ", "2024-q1 ")
        assert path.canonical == "/en/2024-q1"
        assert path == LessonPath.from_segments("en", "2024-q1", depth=2)

    def test_segment_with_slash_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            LessonPath("en/2024-q1")

        assert not isinstance(exc_info.value, MissingParameterError)


class TestParseContentResult:
    """Test cases for parse_content_result."""

    def test_list_becomes_many(self, quarter_listing):
        result = parse_content_result(quarter_listing)

        assert isinstance(result, ManyContent)
        assert len(result) == 3
        assert result.entries[0].name == "01"
        assert result.entries[0].links.html.endswith("src/en/2024-q1/01")

    def test_object_becomes_single(self, day_entry):
        result = parse_content_result(day_entry)

        assert isinstance(result, SingleContent)
        assert result.entry.type == "file"

    def test_null_is_none(self):
        assert parse_content_result(None) is None

    def test_empty_list_is_empty_many(self):
        result = parse_content_result([])
        assert isinstance(result, ManyContent)
        assert len(result) == 0

    def test_payload_round_trips_unchanged(self, quarter_listing, day_entry):
        assert parse_content_result(quarter_listing).to_payload() == quarter_listing
        # Extra fields such as content/encoding survive
        assert parse_content_result(day_entry).to_payload() == day_entry

    def test_absent_fields_stay_absent(self):
        payload = {"name": "q1", "path": "src/en/q1", "type": "dir"}
        assert parse_content_result(payload).to_payload() == payload

    @pytest.mark.parametrize("payload", ["not a listing", 42, [1, 2], [{"name": "x"}]])
    def test_unexpected_shape_is_transport_error(self, payload):
        with pytest.raises(TransportError):
            parse_content_result(payload)

    def test_lookalike_keys_are_not_renamed(self):
        payload = {
            "name": "a",
            "path": "p",
            "type": "file",
            "links": {"self": "x"},
            "_links": {"self_": "y", "html": "h"},
        }

        assert parse_content_result(payload).to_payload() == payload

    def test_key_order_is_preserved(self, day_entry):
        result = parse_content_result(day_entry)

        assert list(result.to_payload()) == list(day_entry)
        assert list(parse_content_result([day_entry]).to_payload()[0]) == list(day_entry)
