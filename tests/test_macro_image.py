"""
image macro tests

Tests embedded data URIs, attachment links and missing attachment handling.
"""

import asyncio
import base64

import pytest

from cardmacros.lib.engine import macros_evaluate
from cardmacros.lib.macros.image import attributes_build
from cardmacros.models.context import GenerationContext, PlaceholderCounter
from cardmacros.models.errors import SemanticError
from cardmacros.models.store import AttachmentData, MemoryProject

PNG = b"\x89PNG\r\n\x1a\nfake"


def run(coro):
    """Run an async coroutine in tests."""
    return asyncio.run(coro)


def make_project() -> MemoryProject:
    project = MemoryProject()
    project.card_add("c1", "First", "")
    project.card_add("c2", "Second", "")
    project.attachment_add("c1", "logo.png", PNG, "image/png")
    return project


def image(options: str, mode="static", **kwargs) -> str:
    defaults = dict(cardKey="c1", project=make_project(), counter=PlaceholderCounter())
    defaults.update(kwargs)
    context = GenerationContext(mode=mode, **defaults)
    return run(macros_evaluate("{{#image}}" + options + "{{/image}}", context))


class TestStaticImage:
    """Test self-contained output"""

    def test_embedded_data_uri(self):
        """Bytes are embedded as base64 with the attachment's MIME type"""
        encoded = base64.b64encode(PNG).decode("ascii")
        assert image('"fileName":"logo.png"') == f"image::data:image/png;base64,{encoded}[]"

    def test_attributes(self):
        result = image('"fileName":"logo.png","alt":"Logo","title":"Our logo"')
        assert result.endswith('[alt="Logo",title="Our logo"]')

    def test_separate_attachment_store(self):
        """An explicit attachment store wins over the project"""

        class Blobs:
            async def attachment_read(self, cardKey, fileName):
                return AttachmentData(data=b"abc", mimeType="image/gif")

        result = image('"fileName":"logo.png"', attachments=Blobs())
        assert result == "image::data:image/gif;base64,YWJj[]"


class TestLinkedImage:
    """Test output pointing at the attachment endpoint"""

    @pytest.mark.parametrize("mode", ["inject", "staticSite"])
    def test_attachment_url(self, mode):
        result = image('"fileName":"logo.png","alt":"Logo"', mode)
        assert result == 'image::/api/cards/c1/a/logo.png[alt="Logo"]'

    def test_other_card(self):
        """cardKey selects another card's attachment"""
        result = image('"fileName":"logo.png","cardKey":"c1"', "inject", cardKey="c2")
        assert result == "image::/api/cards/c1/a/logo.png[]"


class TestMissingAttachment:
    """Test attachment lookups that fail"""

    def test_missing_file_rendered(self):
        result = image('"fileName":"nope.png"', "inject")
        assert "Macro Error" in result
        assert "Attachment file 'nope.png' not found in card 'c1'" in result

    def test_missing_file_validate(self):
        with pytest.raises(SemanticError, match="Attachment file 'nope.png' not found in card 'c1'"):
            image('"fileName":"nope.png"', "validate")

    def test_missing_card(self):
        result = image('"fileName":"logo.png","cardKey":"ghost"')
        assert "Card key ghost not found" in result

    def test_validate_passes_for_existing_file(self):
        assert image('"fileName":"logo.png"', "validate") == ""


class TestAttributes:
    """Test the AsciiDoc attribute list"""

    def test_none_given(self):
        assert attributes_build({"fileName": "a.png"}) == ""

    def test_title_only(self):
        assert attributes_build({"fileName": "a.png", "title": "T"}) == 'title="T"'

    def test_quotes_escaped(self):
        """Quotes inside a value cannot end the attribute early"""
        result = attributes_build({"fileName": "a.png", "alt": 'The "main" logo', "title": "T"})
        assert result == 'alt="The \\"main\\" logo",title="T"'

    def test_quotes_escaped_in_output(self):
        result = image('"fileName":"logo.png","title":"Say \\"cheese\\""', "inject")
        assert result == 'image::/api/cards/c1/a/logo.png[title="Say \\"cheese\\""]'
