"""Unit tests for PathTemplate parsing, composition and matching.

Tests cover:
- Parsing literals and ":name" parameters (empty segments dropped)
- join() concatenation of base and sub paths
- Duplicate and empty parameter names rejected
- Matching raw segments with percent-decoding of captured values
"""

import pytest

from api_server.domain.contracts import PathSegment, PathTemplate
from api_server.domain.contracts.path_template import split_raw_path


@pytest.mark.unit
class TestPathTemplateParsing:
    """Test template construction."""

    def test_parse_literals_and_parameters(self):
        template = PathTemplate.parse("/v1/books/:bookId")

        assert template.segments == (
            PathSegment("v1"),
            PathSegment("books"),
            PathSegment("bookId", is_parameter=True),
        )
        assert template.parameter_names == ("bookId",)

    def test_empty_segments_dropped(self):
        assert PathTemplate.parse("//a///b/") == PathTemplate.parse("a/b")

    def test_root_template(self):
        assert str(PathTemplate.parse("/")) == "/"

    def test_join(self):
        template = PathTemplate.parse("/v1/books/:bookId").join("chats/:chatId")

        assert str(template) == "/v1/books/:bookId/chats/:chatId"
        assert template.parameter_names == ("bookId", "chatId")

    def test_duplicate_parameter_rejected(self):
        with pytest.raises(ValueError, match="Duplicate path parameter ':id'"):
            PathTemplate.parse("/a/:id").join("b/:id")

    def test_empty_parameter_name_rejected(self):
        with pytest.raises(ValueError, match="Empty path parameter"):
            PathTemplate.parse("/a/:")


@pytest.mark.unit
class TestPathTemplateMatching:
    """Test matching raw request segments."""

    def test_match_captures_parameters(self):
        template = PathTemplate.parse("/items/:itemId")

        assert template.match(["items", "42"]) == {"itemId": "42"}

    def test_length_mismatch(self):
        template = PathTemplate.parse("/items/:itemId")

        assert template.match(["items"]) is None
        assert template.match(["items", "1", "extra"]) is None

    def test_literal_mismatch(self):
        assert PathTemplate.parse("/items/:itemId").match(["users", "1"]) is None

    def test_encoded_slash_is_one_value(self):
        template = PathTemplate.parse("/files/:name")

        assert template.match(split_raw_path("/files/a%2Fb")) == {"name": "a/b"}

    def test_encoded_literal_matches(self):
        assert PathTemplate.parse("/hello world").match(["hello%20world"]) == {}

    def test_split_raw_path(self):
        assert split_raw_path("/a//b/") == ["a", "b"]
