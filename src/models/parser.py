"""
Parser-specific data models

Type-safe structures for raw block extraction and directive scanning.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from .macros import RawBlockRecord


@dataclass
class DirectiveMatch:
    """
    Result of finding a directive opener in source text

    Returned by DirectiveRuntime.directive_find() when a {{#name}} opener is
    located.

    Attributes:
        name: The directive name (e.g., "include", "scoreCard")
        position: Character position of the opener's first brace
        bodyStart: Character position just past the opener

    Example:
        For source 'x {{#xref}}"cardKey":"a"{{/xref}}':
        DirectiveMatch(name="xref", position=2, bodyStart=11)
    """
    name: str
    position: int
    bodyStart: int


@dataclass
class ExtractedSource:
    """
    Result of removing raw blocks from a document

    Returned by RawBlockExtractor.extract().

    Attributes:
        stripped: Source with each raw block replaced by its sentinel
        rawBlocks: Records of the removed blocks, in document order

    Example:
        Input: "a {{#raw}}{{#x}}{{/raw}} b"
        Result: ExtractedSource(
            stripped="a \\x00RAW_0\\x00 b",
            rawBlocks=[RawBlockRecord(token="\\x00RAW_0\\x00", literalText="{{#x}}",
                                      startLine=1, endLine=1)]
        )
    """
    stripped: str
    rawBlocks: List[RawBlockRecord] = field(default_factory=list)
    _tokenPositions: Dict[str, int] = field(default_factory=dict, init=False, repr=False)

    def line_original(self, position: int) -> int:
        """
        Map a position in the stripped text to its 1-based source line

        Every raw block before the position gives back the newlines its
        sentinel collapsed.
        """
        if not self._tokenPositions and self.rawBlocks:
            self._tokenPositions = {
                block.token: self.stripped.find(block.token) for block in self.rawBlocks
            }
        line = self.stripped.count("\n", 0, position) + 1
        for block in self.rawBlocks:
            token_position = self._tokenPositions.get(block.token, -1)
            if 0 <= token_position < position:
                line += block.lines_spanned
        return line
