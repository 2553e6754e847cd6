"""
Directive runtime tests

Tests the synchronous block pass: handler dispatch, pass-through of other
text, localized errors and directive body parsing.
"""

import pytest

from cardmacros.lib.runtime import DirectiveRuntime, body_parse
from cardmacros.models.errors import MacroError, ParseError


def upper_runtime() -> DirectiveRuntime:
    runtime = DirectiveRuntime()
    runtime.handler_register("shout", lambda body, line: body.upper())
    return runtime


class TestRender:
    """Test directives are replaced by handler output"""

    def test_plain_text_unchanged(self):
        """Text without openers passes through"""
        text = "= Title\n\n{{variable}} and {{/shout}} and {single}\n"
        assert upper_runtime().render(text) == text

    def test_single_directive(self):
        """Directive replaced by handler output"""
        assert upper_runtime().render("say {{#shout}}hi{{/shout}}!") == "say HI!"

    def test_multiple_directives(self):
        """Directives handled left to right"""
        result = upper_runtime().render("{{#shout}}a{{/shout}}-{{#shout}}b{{/shout}}")
        assert result == "A-B"

    def test_handler_output_not_rescanned(self):
        """Output that looks like a directive stays literal"""
        runtime = DirectiveRuntime()
        runtime.handler_register("echo", lambda body, line: "{{#echo}}x{{/echo}}")
        assert runtime.render("{{#echo}}{{/echo}}") == "{{#echo}}x{{/echo}}"

    def test_handler_receives_line(self):
        """Handlers get the opener's line number"""
        lines = []
        runtime = DirectiveRuntime()
        runtime.handler_register("mark", lambda body, line: lines.append(line) or "")
        runtime.render("one\ntwo\n{{#mark}}{{/mark}}\n{{#mark}}\n{{/mark}}")
        assert lines == [3, 4]

    def test_custom_line_mapper(self):
        """Line numbers come from the supplied mapper"""
        lines = []
        runtime = DirectiveRuntime()
        runtime.handler_register("mark", lambda body, line: lines.append(line) or "")
        runtime.render("{{#mark}}{{/mark}}", line_of=lambda position: 42)
        assert lines == [42]


    def test_same_name_nested_body(self):
        """A body holding the same directive closes at the matching marker"""
        runtime = DirectiveRuntime()
        runtime.handler_register("wrap", lambda body, line: f"[{body}]")
        result = runtime.render("{{#wrap}}a{{#wrap}}b{{/wrap}}c{{/wrap}}!")
        assert result == "[a{{#wrap}}b{{/wrap}}c]!"

    def test_nested_render_from_handler(self):
        """Handlers can render their own body through the runtime"""
        runtime = DirectiveRuntime()
        runtime.handler_register("shout", lambda body, line: body.upper())
        runtime.handler_register("wrap", lambda body, line: "[" + runtime.render(body) + "]")
        assert runtime.render("{{#wrap}}a {{#shout}}b{{/shout}} c{{/wrap}}") == "[a B c]"


class TestRenderErrors:
    """Test failing directives are reported one at a time"""

    def collect(self, runtime, source):
        errors = []

        def on_error(error, name):
            errors.append((name, error))
            return "<ERR>"

        return runtime.render(source, on_error=on_error), errors

    def test_unknown_name(self):
        """Unregistered names fail at the opener, the rest still renders"""
        result, errors = self.collect(upper_runtime(), "{{#nope}}x{{/nope}} {{#shout}}y{{/shout}}")

        assert errors[0][0] == "nope"
        assert isinstance(errors[0][1], ParseError)
        assert "Unknown macro 'nope'" in errors[0][1].message
        assert result == "<ERR>x{{/nope}} Y"

    def test_unclosed_directive(self):
        """Missing closing marker fails at the opener's line"""
        result, errors = self.collect(upper_runtime(), "a\n{{#shout}}never closed")

        assert errors[0][1].line == 2
        assert "missing its closing tag" in errors[0][1].message
        assert result == "a\n<ERR>never closed"

    def test_handler_error_located(self):
        """MacroErrors from handlers get the line and macro name"""

        def failing(body, line):
            raise MacroError("bad")

        runtime = DirectiveRuntime()
        runtime.handler_register("fail", failing)
        result, errors = self.collect(runtime, "\n\n{{#fail}}{{/fail}}")

        error = errors[0][1]
        assert (error.line, error.macro_name) == (3, "fail")
        assert str(error) == "bad at line 3"

    def test_unclosed_outer_of_same_name(self):
        """An unmatched outer opener fails while the inner pair still renders"""
        runtime = DirectiveRuntime()
        runtime.handler_register("wrap", lambda body, line: f"[{body}]")
        result, errors = self.collect(runtime, "{{#wrap}}a{{#wrap}}b{{/wrap}}")

        assert len(errors) == 1
        assert result == "<ERR>a[b]"

    def test_errors_raise_without_handler(self):
        """Without on_error the first failure propagates"""
        with pytest.raises(ParseError):
            upper_runtime().render("{{#nope}}{{/nope}}")


class TestBodyParse:
    """Test directive bodies are read as inline JSON key/value lists"""

    def test_key_values(self):
        """Body is an object without its braces"""
        assert body_parse('"title":"T","value":85') == {"title": "T", "value": 85}

    def test_empty_body(self):
        """Empty and whitespace-only bodies mean no options"""
        assert body_parse("") == {}
        assert body_parse("  \n ") == {}

    def test_multiline_body(self):
        """Bodies may span lines"""
        assert body_parse('\n  "cardKey": "c1",\n  "levelOffset": "+1"\n') == {
            "cardKey": "c1",
            "levelOffset": "+1",
        }

    def test_invalid_body_line(self):
        """Parse errors point at the failing line of the body"""
        with pytest.raises(ParseError) as excinfo:
            body_parse('"a": 1,\n"b": ', line=10)

        assert excinfo.value.line == 11
        assert excinfo.value.message.startswith("Invalid macro body")

    @pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
    def test_non_json_constants_rejected(self, constant):
        """NaN and Infinity are not JSON numbers"""
        with pytest.raises(ParseError) as excinfo:
            body_parse(f'"title": "T", "value": {constant}', line=4)

        assert excinfo.value.line == 4
        assert constant.lstrip("-") in excinfo.value.message
