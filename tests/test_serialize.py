"""
Serialization helper tests

Tests admonitions, placeholder tags, directive source generation and the
schema-check entry point.
"""

import base64
import json

import pytest

from cardmacros.lib.runtime import DirectiveRuntime, body_parse
from cardmacros.lib.serialize import (
    admonition_create,
    attributes_flatten,
    htmlPlaceholder_create,
    macro_create,
    macroContent_validate,
    options_decode,
    passthrough_create,
    placeholder_create,
)
from cardmacros.models.context import PlaceholderCounter
from cardmacros.models.errors import SchemaError
from cardmacros.models.macros import MacroMetadata

TEST_META = MacroMetadata(name="testName", tagName="test-tag-name", schemaId="test-schema")


def directive_parse(source: str) -> dict:
    """Run source through the directive runtime and return the parsed body"""
    captured = []
    runtime = DirectiveRuntime()
    name = source[3:source.index("}}")]
    runtime.handler_register(name, lambda body, line: captured.append(body_parse(body, line)) or "")
    runtime.render(source)
    return captured[0]


class TestAdmonition:
    """Test AsciiDoc admonition and passthrough blocks"""

    def test_admonition_format(self):
        """Kind, title and content in the delimited block layout"""
        assert admonition_create("WARNING", "Macro Error", "Error: boom") == (
            "[WARNING]\n.Macro Error\n====\nError: boom\n====\n\n"
        )

    def test_passthrough_format(self):
        """Content fenced by ++++ on their own lines"""
        assert passthrough_create("<b>x</b>") == "\n++++\n<b>x</b>\n++++\n"


class TestHtmlPlaceholder:
    """Test placeholder tags"""

    def test_simple_placeholder(self):
        """One attribute per field, then key and options"""
        tag = htmlPlaceholder_create(TEST_META, {"test": "test-data"}, PlaceholderCounter())
        assert tag == (
            '<test-tag-name test="test-data" key="macro-0" '
            'options="eyJ0ZXN0IjoidGVzdC1kYXRhIn0="/>'
        )

    def test_options_decode_to_json(self):
        """options attribute is the base64 of the JSON encoding of data"""
        data = {"title": "Open", "value": 3, "nested": {"deep": [1, 2]}}
        record = placeholder_create(TEST_META, data, PlaceholderCounter())

        decoded = base64.b64decode(record.base64Options).decode("utf-8")
        assert json.loads(decoded) == data
        assert options_decode(record.base64Options) == data

    def test_nested_objects_flattened(self):
        """Nested keys become dotted attribute names"""
        tag = htmlPlaceholder_create(
            TEST_META, {"a": 1, "b": {"c": {"d": "deep"}}}, PlaceholderCounter()
        )
        assert 'a="1"' in tag
        assert 'b.c.d="deep"' in tag

    def test_attribute_values_escaped(self):
        """Quotes and angle brackets cannot break the tag"""
        tag = htmlPlaceholder_create(TEST_META, {"t": 'say "hi" <b>'}, PlaceholderCounter())
        assert 't="say &quot;hi&quot; &lt;b&gt;"' in tag

    def test_keys_increase(self):
        """Each placeholder from one counter gets a new key"""
        counter = PlaceholderCounter()
        first = placeholder_create(TEST_META, {}, counter)
        second = placeholder_create(TEST_META, {}, counter)
        assert (first.key, second.key) == ("macro-0", "macro-1")

    def test_flatten_drops_none_and_encodes_lists(self):
        """Nulls vanish, lists and booleans are JSON text"""
        assert attributes_flatten({"x": None, "l": [1, "a"], "b": True}) == {
            "l": '[1,"a"]',
            "b": "true",
        }


class TestMacroCreate:
    """Test directive source generation"""

    def test_simple_macro(self):
        """Body is the JSON object without braces"""
        assert macro_create("xref", {"cardKey": "c1"}) == '{{#xref}}"cardKey": "c1"{{/xref}}'

    def test_empty_options(self):
        """No options give an empty body"""
        assert macro_create("createCards", {}) == "{{#createCards}}{{/createCards}}"

    def test_round_trip_through_runtime(self):
        """Parsing the generated source yields the options"""
        options = {"title": "T", "value": 85, "legend": "done", "colour": "red"}
        assert directive_parse(macro_create("percentage", options)) == options

    def test_round_trip_nested(self):
        """Nested objects survive the round trip"""
        options = {
            "buttonLabel": "New",
            "template": "base/templates/page",
            "link": {"linkType": "base/linkTypes/test", "direction": "from", "cardKey": "c1"},
        }
        assert directive_parse(macro_create("createCards", options)) == options

    def test_braces_in_values_cannot_close_the_block(self):
        """'{{' in a value is escaped so the body has no closing marker"""
        options = {"text": "a {{/note}} b {{#raw}}"}
        source = macro_create("note", options)

        assert source.count("{{/note}}") == 1
        assert directive_parse(source) == options


class TestMacroContentValidate:
    """Test the single schema-check entry point"""

    def test_valid_data_returned(self):
        """Conforming data comes back unchanged"""
        meta = MacroMetadata("xref", "xref-macro", "xrefMacroSchema")
        data = {"cardKey": "c1"}
        assert macroContent_validate(meta, data) is data

    def test_error_names_macro_and_field(self):
        """Failure message starts with the macro name and lists the field"""
        meta = MacroMetadata("xref", "xref-macro", "xrefMacroSchema")
        with pytest.raises(SchemaError) as excinfo:
            macroContent_validate(meta, {})

        assert excinfo.value.message.startswith("xref macro JSON validation error: cardKey")
        assert excinfo.value.macro_name == "xref"

    def test_missing_schema_id(self):
        """Macros without a schema cannot be validated"""
        meta = MacroMetadata("bare", "bare-macro", "")
        with pytest.raises(SchemaError, match="does not have a schema"):
            macroContent_validate(meta, {})

    def test_custom_validator_used(self):
        """An explicit validator replaces the built-in one"""

        class Recorder:
            def __init__(self):
                self.calls = []

            def validate(self, schemaId, data):
                self.calls.append(schemaId)
                return data

        recorder = Recorder()
        macroContent_validate(TEST_META, {"any": 1}, recorder)
        assert recorder.calls == ["test-schema"]
