"""Unit tests for content flattening and role normalization."""

from convoscope.importers.content import UNPARSED_MARKER, flatten_content, parse_block
from convoscope.importers.roles import normalize_role
from convoscope.models.content import (
    ImageBlock,
    TextBlock,
    ToolResultBlock,
    UnknownBlock,
)


class TestFlattenContent:
    """Tests for flatten_content."""

    def test_plain_string_is_returned_as_is(self) -> None:
        assert flatten_content("  Hello  ") == "  Hello  "

    def test_parts_object_joins_with_blank_line(self) -> None:
        assert flatten_content({"parts": ["one", "two"]}) == "one\n\ntwo"

    def test_parts_object_stringifies_non_strings(self) -> None:
        text = flatten_content({"parts": ["see", {"asset": "x"}]})
        assert text == 'see\n\n{"asset":"x"}'

    def test_text_block_array(self) -> None:
        blocks = [
            {"type": "text", "text": "first"},
            {"type": "output_text", "text": "second"},
        ]
        assert flatten_content(blocks) == "first\n\nsecond"

    def test_tool_result_string_content(self) -> None:
        blocks = [{"type": "tool_result", "content": "42"}]
        assert flatten_content(blocks) == "42"

    def test_tool_result_list_content(self) -> None:
        blocks = [
            {
                "type": "tool_result",
                "content": ["raw", {"type": "text", "text": "nested"}, {"k": 1}],
            }
        ]
        text = flatten_content(blocks)
        assert text.startswith("raw\n\nnested\n\n```json\n")
        assert '"k": 1' in text

    def test_tool_result_empty_content_is_skipped(self) -> None:
        blocks = [{"type": "tool_result", "content": None}, {"type": "text", "text": "x"}]
        assert flatten_content(blocks) == "x"

    def test_image_block_placeholder(self) -> None:
        assert flatten_content([{"type": "image", "id": "img-1"}]) == "![image:img-1]"
        assert flatten_content([{"type": "input_image"}]) == "![image:asset]"

    def test_unknown_block_is_fenced_json(self) -> None:
        text = flatten_content([{"type": "citation", "url": "https://example.com"}])
        assert text.startswith("```json\n")
        assert text.endswith("\n```")
        assert "https://example.com" in text

    def test_text_field_on_untyped_block(self) -> None:
        assert flatten_content([{"text": "loose"}]) == "loose"

    def test_bare_strings_in_array(self) -> None:
        assert flatten_content(["a", "b"]) == "a\n\nb"

    def test_object_with_text_field(self) -> None:
        assert flatten_content({"text": "hi"}) == "hi"

    def test_unrecognized_shapes_flatten_to_empty(self) -> None:
        assert flatten_content(None) == ""
        assert flatten_content(42) == ""
        assert flatten_content({}) == ""

    def test_every_block_contributes(self) -> None:
        blocks = [
            {"type": "text", "text": "alpha"},
            {"type": "image_url"},
            {"weird": True},
            "omega",
        ]
        text = flatten_content(blocks)
        for fragment in ("alpha", "![image:", "weird", "omega"):
            assert fragment in text

    def test_unserializable_block_becomes_marker(self) -> None:
        cyclic: dict = {"type": "mystery"}
        cyclic["self"] = cyclic

        text = flatten_content([{"type": "text", "text": "ok"}, cyclic])

        assert text == f"ok\n\n{UNPARSED_MARKER}"


class TestParseBlock:
    """Tests for parse_block classification."""

    def test_variants(self) -> None:
        assert parse_block("s") == TextBlock("s")
        assert parse_block({"type": "text", "text": "t"}) == TextBlock("t")
        assert parse_block({"type": "tool_result", "content": "c"}) == ToolResultBlock("c")
        assert parse_block({"type": "image_file", "name": "pic.png"}) == ImageBlock("pic.png")
        assert isinstance(parse_block({"type": "other"}), UnknownBlock)
        assert isinstance(parse_block(3), UnknownBlock)

    def test_text_type_without_text_is_unknown(self) -> None:
        assert isinstance(parse_block({"type": "text", "text": ""}), UnknownBlock)


class TestNormalizeRole:
    """Tests for normalize_role."""

    def test_known_roles(self) -> None:
        assert normalize_role("user") == "user"
        assert normalize_role("USER") == "user"
        assert normalize_role("assistant") == "assistant"
        assert normalize_role("gpt") == "assistant"

    def test_tool_substring(self) -> None:
        assert normalize_role("tool") == "tool"
        assert normalize_role("browser_tool") == "tool"

    def test_mapping_author(self) -> None:
        assert normalize_role({"role": "assistant", "name": None}) == "assistant"

    def test_fallback_to_system(self) -> None:
        assert normalize_role("critic") == "system"
        assert normalize_role(None) == "system"
        assert normalize_role({}) == "system"
        assert normalize_role(7) == "system"
