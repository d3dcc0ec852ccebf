"""
Tests for SectionSerializer and the document splicer.
"""

import pytest

from upmpack.catalog_models import Catalog
from upmpack.dependency_section import (
    RawValue,
    SectionSerializer,
    locate_section,
    parse_entries,
    splice,
)
from upmpack.upmpack_exceptions import SectionNotFound


class TestSectionSerializer:
    """Tests for ordering and formatting of serialized sections."""

    @pytest.fixture
    def serializer(self, small_catalog):
        return SectionSerializer(small_catalog)

    def test_catalog_order_then_alphabetical(self):
        catalog = Catalog.from_entries(
            [{"name": "z.pkg", "value": "1"}, {"name": "a.pkg", "value": "1"}]
        )
        serializer = SectionSerializer(catalog)
        entries = {"m": "1", "a.pkg": "2", "c": "3", "z.pkg": "4"}
        assert [name for name, _ in serializer.order(entries)] == ["z.pkg", "a.pkg", "c", "m"]

    def test_format(self, serializer):
        text = serializer.serialize({"x": "1", "a.pkg": "2.0"}, key_indent="  ")
        assert text == '{\n    "a.pkg": "2.0",\n    "x": "1"\n  }'

    def test_format_at_top_level(self, serializer):
        assert serializer.serialize({"b.pkg": "3.0"}, key_indent="") == '{\n  "b.pkg": "3.0"\n}'

    def test_empty_section(self, serializer):
        assert serializer.serialize({}, key_indent="  ") == "{\n  }"

    def test_crlf_newlines(self, serializer):
        text = serializer.serialize({"a.pkg": "2.0", "x": "1"}, key_indent="", newline="\r\n")
        assert text == '{\r\n  "a.pkg": "2.0",\r\n  "x": "1"\r\n}'

    def test_custom_indent(self, small_catalog):
        serializer = SectionSerializer(small_catalog, indent="\t")
        assert serializer.serialize({"x": "1"}, key_indent="\t") == '{\n\t\t"x": "1"\n\t}'

    def test_raw_values_are_verbatim(self, serializer):
        text = serializer.serialize({"n": RawValue("3"), "s": "3"}, key_indent="")
        assert text == '{\n  "n": 3,\n  "s": "3"\n}'

    def test_strings_are_escaped(self, serializer):
        text = serializer.serialize({"q": 'say "hi"', "u": "ß"}, key_indent="")
        assert '"q": "say \\"hi\\""' in text
        assert '"u": "ß"' in text

    @pytest.mark.parametrize(
        "raw",
        [
            "{}",
            '{"a.pkg":"1.0"}',
            '{\n    "z": "1",\n    "b.pkg": "3.0",\n    "m": "x{y}"\n  }',
            '{"q": "say \\"hi\\"", "n": 42, "nested": {\n  "k": [1, 2]\n}}',
            '{"dup": "1", "dup": "2", bad line, "ok": "yes",}',
        ],
    )
    def test_idempotence(self, serializer, raw):
        once = serializer.serialize(parse_entries(raw).entries)
        twice = serializer.serialize(parse_entries(once).entries)
        assert once == twice


class TestSplice:
    """Tests for splice."""

    def test_only_the_section_changes(self, unity_manifest):
        section = locate_section(unity_manifest)
        new_text = '{\n    "x": "1"\n  }'
        result = splice(unity_manifest, section, new_text)

        assert result[: section.start] == unity_manifest[: section.start]
        assert result[section.start + len(new_text):] == unity_manifest[section.end:]
        assert result[section.start:section.start + len(new_text)] == new_text

    def test_unrelated_content_is_byte_identical(self):
        prefix = '{\n  // comment-like text\t\n  "name":   "demo",\n  "dependencies": '
        suffix = ',\n\n  "other" : { "dependencies-ish": "{" }\n}\n'
        document = prefix + '{"a": "1"}' + suffix
        section = locate_section(document)
        result = splice(document, section, "{}")
        assert result == prefix + "{}" + suffix

    def test_section_moved(self, unity_manifest):
        section = locate_section(unity_manifest)
        shifted = "\n" + unity_manifest
        with pytest.raises(SectionNotFound):
            splice(shifted, section, "{}")

    def test_section_missing(self, unity_manifest):
        section = locate_section(unity_manifest)
        with pytest.raises(SectionNotFound):
            splice('{"name": "demo"}', section, "{}")
