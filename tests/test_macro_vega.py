"""
Chart macro tests - vega and vegaLite

Tests chart placeholders in inject mode, the export note and spec checks.
"""

import asyncio

import pytest

from cardmacros.lib.engine import macros_evaluate
from cardmacros.lib.serialize import macro_create, options_decode
from cardmacros.models.context import GenerationContext, PlaceholderCounter
from cardmacros.models.errors import SchemaError
from cardmacros.models.store import MemoryProject

PIE = {
    "$schema": "https://vega.github.io/schema/vega-lite/v6.json",
    "description": "A simple pie chart",
    "data": {"values": [{"category": 1, "value": 4}, {"category": 2, "value": 6}]},
    "mark": "arc",
    "encoding": {
        "theta": {"field": "value", "type": "quantitative"},
        "color": {"field": "category", "type": "nominal"},
    },
}


def run(coro):
    """Run an async coroutine in tests."""
    return asyncio.run(coro)


def evaluate(source, mode) -> str:
    project = MemoryProject()
    project.card_add("c1", "First", "")
    context = GenerationContext(mode=mode, cardKey="c1", project=project, counter=PlaceholderCounter())
    return run(macros_evaluate(source, context))


def options_of(result: str) -> dict:
    encoded = result.split('options="', 1)[1].split('"', 1)[0]
    return options_decode(encoded)


class TestVega:
    """Test vega charts"""

    SOURCE = macro_create("vega", {"spec": {"description": "Bars", "marks": []}})

    @pytest.mark.parametrize("mode", ["inject", "staticSite"])
    def test_inject_element(self, mode):
        """Live views get a vega-macro element carrying the chart definition"""
        result = evaluate(self.SOURCE, mode)

        assert result.startswith("\n++++\n<vega-macro ")
        assert options_of(result) == {"spec": {"description": "Bars", "marks": []}}

    def test_static_note(self):
        result = evaluate(self.SOURCE, "static")
        assert result.startswith("[NOTE]\n.Chart\n====\n")
        assert "Chart 'Bars' is only available in the interactive view." in result

    def test_spec_required(self):
        with pytest.raises(SchemaError, match="spec"):
            evaluate("{{#vega}}{{/vega}}", "validate")

    def test_spec_must_be_object(self):
        assert "Macro Error" in evaluate('{{#vega}}"spec":[1]{{/vega}}', "inject")


class TestVegaLite:
    """Test Vega-Lite charts handed to the vega element"""

    SOURCE = macro_create("vegaLite", {"spec": PIE})

    def test_rendered_as_vega_element(self):
        result = evaluate(self.SOURCE, "inject")

        assert "<vega-macro " in result
        assert options_of(result) == {"spec": PIE}

    def test_static_note(self):
        assert "Chart 'A simple pie chart'" in evaluate(self.SOURCE, "static")

    def test_validate(self):
        assert evaluate(self.SOURCE, "validate") == ""

    def test_unknown_option_rejected(self):
        source = macro_create("vegaLite", {"spec": PIE, "width": 300})
        with pytest.raises(SchemaError, match="width"):
            evaluate(source, "validate")
