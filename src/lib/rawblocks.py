"""
Raw block extraction and restoration

Regions between {{#raw}} and {{/raw}} bypass macro evaluation entirely.
Before the directive pass they are cut out and replaced by sentinels
(\x00RAW_N\x00); after every placeholder has been resolved the literal text
is put back, byte for byte. The markers themselves are dropped.

Scanning is a single left-to-right pass over the lines of the source so
errors can cite exact line numbers:
- a second {{#raw}} before {{/raw}} is a nested block (inner line reported,
  outer start line referenced in the message)
- input ending inside a block is an unclosed block (opening line reported)
- {{/raw}} with no open block is reported at its own line

Example:
    >>> extractor = RawBlockExtractor()
    >>> extracted = extractor.extract("keep {{#raw}}{{#xref}}{{/xref}}{{/raw}}")
    >>> extracted.stripped
    'keep \\x00RAW_0\\x00'
    >>> extractor.restore(extracted.stripped, extracted.rawBlocks)
    'keep {{#xref}}{{/xref}}'
"""

import re
from typing import Iterable, List, Optional

from ..config import appsettings
from ..models.errors import RawBlockError
from ..models.macros import RawBlockRecord
from ..models.parser import ExtractedSource
from .log import LOG

RAW_OPEN = "{{#raw}}"
RAW_CLOSE = "{{/raw}}"

_MARKER = re.compile(r"\{\{(#|/)raw\}\}")


class RawBlockExtractor:
    """
    Removes and restores literal passthrough regions

    Stateless apart from settings; one instance can serve any number of
    documents.
    """

    def __init__(self, settings=None) -> None:
        self.settings = settings or appsettings

    def extract(self, source: str) -> ExtractedSource:
        """
        Replace every raw block in source with a unique sentinel

        Args:
            source: Document text as authored

        Returns:
            ExtractedSource with the stripped text and one RawBlockRecord per
            block, in document order

        Raises:
            RawBlockError: nested, unclosed or unbalanced raw markers
        """
        result: List[str] = []
        literal: List[str] = []
        blocks: List[RawBlockRecord] = []
        open_line: Optional[int] = None

        for line_number, line in enumerate(source.splitlines(keepends=True), start=1):
            pos = 0
            for match in _MARKER.finditer(line):
                segment = line[pos:match.start()]
                if open_line is None:
                    result.append(segment)
                else:
                    literal.append(segment)

                if match.group(1) == "#":
                    if open_line is not None:
                        raise RawBlockError(
                            f"Nested raw blocks are not allowed: raw block starting at line "
                            f"{open_line} contains another raw block",
                            line=line_number,
                        )
                    open_line = line_number
                    literal = []
                else:
                    if open_line is None:
                        raise RawBlockError(
                            "Closing raw marker without a matching opening marker",
                            line=line_number,
                        )
                    token = self.settings.rawToken_make(len(blocks))
                    blocks.append(
                        RawBlockRecord(
                            token=token,
                            literalText="".join(literal),
                            startLine=open_line,
                            endLine=line_number,
                        )
                    )
                    result.append(token)
                    open_line = None

                pos = match.end()

            # Remainder of the line after the last marker
            if open_line is None:
                result.append(line[pos:])
            else:
                literal.append(line[pos:])

        if open_line is not None:
            raise RawBlockError("Unclosed raw block", line=open_line)

        if blocks:
            LOG(f"Extracted {len(blocks)} raw block(s)", level=3)

        return ExtractedSource(stripped="".join(result), rawBlocks=blocks)

    def restore(self, text: str, rawBlocks: Iterable[RawBlockRecord]) -> str:
        """
        Put literal raw text back in place of its sentinels

        Substitution is a single regex pass, so restored text is never
        scanned again even if it happens to look like a sentinel.

        Args:
            text: Fully evaluated text still containing sentinels
            rawBlocks: Records produced by extract() for the same document

        Returns:
            Text with every known sentinel replaced by its literal text;
            unknown sentinels are left untouched
        """
        literals = {block.token: block.literalText for block in rawBlocks}
        if not literals:
            return text

        pattern = re.compile(
            re.escape(self.settings.raw_token_prefix) + r"\d+" + re.escape(self.settings.raw_token_suffix)
        )

        def expand_raw_token(match: re.Match[str]) -> str:
            """Expand a RAW_N sentinel with its literal text"""
            return literals.get(match.group(0), match.group(0))

        return pattern.sub(expand_raw_token, text)
