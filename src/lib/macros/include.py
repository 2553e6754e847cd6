"""
include macro: transclude another card's content

The included card is evaluated through the full pipeline with cardKey
rebound, then its headings are shifted by levelOffset. Raw blocks of the
included card are restored only after the shift, so their headings stay as
written.

Options:
    cardKey      card to include (required)
    levelOffset  heading shift, an integer or "N", "+N", "-N"
    title        include (default) / exclude / only
    pageTitles   normal (default) adds an anchor; discrete keeps headings out
                 of the table of contents
    whitespace   keep (default) / trim, applied to the fully restored text
    escape       json / csv escaping of the final text
"""

import re
from typing import Any, Dict, List, Optional, Union, TYPE_CHECKING

from ...config import appsettings
from ...models.context import GenerationContext
from ...models.errors import ParameterError, SemanticError
from ...models.macros import MacroMetadata, RawBlockRecord
from ..log import LOG
from ..rawblocks import RawBlockExtractor
from .base import BaseMacro

if TYPE_CHECKING:
    from . import MacroRegistry

_OFFSET = re.compile(r"^[+-]?\d+$")
_HEADING = re.compile(r"^(=+)[ \t]+(\S.*?)[ \t]*$", re.MULTILINE)


def levelOffset_parse(value: Optional[Union[int, str]], limit: int) -> int:
    """
    Parse and clamp a levelOffset option

    Args:
        value: Integer, numeric string with optional sign, or None
        limit: Largest absolute offset allowed

    Returns:
        Offset clamped to [-limit, limit]; 0 when value is None

    Raises:
        ParameterError: value is not an integer or a signed integer string

    Example:
        >>> levelOffset_parse("+2", 5)
        2
        >>> levelOffset_parse(-9, 5)
        -5
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ParameterError(f"Invalid level offset: {value}")
    if isinstance(value, int):
        offset = value
    else:
        text = str(value).strip()
        if not _OFFSET.match(text):
            raise ParameterError(f"Invalid level offset: {value}")
        offset = int(text)
    return max(-limit, min(limit, offset))


def headings_adjust(text: str, offset: int, discrete: bool, limit: int) -> str:
    """
    Shift every AsciiDoc section heading in text by offset levels

    New levels are floored at 1 and capped at limit + 1. Block delimiters such
    as ==== have no title and are left alone.
    """

    def heading_shift(match: re.Match[str]) -> str:
        level = min(max(1, len(match.group(1)) + offset), limit + 1)
        prefix = "[discrete]\n" if discrete else ""
        return f"{prefix}{'=' * level} {match.group(2)}"

    return _HEADING.sub(heading_shift, text)


def text_escape(text: str, escape: Optional[str]) -> str:
    """
    Escape included text for embedding in a JSON string or a CSV field

    Example:
        >>> text_escape('say "hi"', "csv")
        'say ""hi""'
    """
    if escape == "json":
        return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    if escape == "csv":
        return text.replace('"', '""')
    return text


class IncludeMacro(BaseMacro):
    metadata = MacroMetadata(name="include", tagName="include-macro", schemaId="includeMacroSchema")

    def __init__(self, registry: Optional["MacroRegistry"] = None) -> None:
        # Nested evaluations use the same macro set as the including document
        self.registry = registry

    def cycle_check(self, context: GenerationContext, cardKey: str) -> None:
        """
        Reject includes that revisit a card on the include chain

        Raises:
            SemanticError: cycle found, or the include depth limit reached
        """
        if not appsettings.include_cycle_guard:
            return
        chain = context.includeChain + ((context.cardKey,) if context.cardKey else ())
        if cardKey in chain:
            path = " -> ".join(chain + (cardKey,))
            raise SemanticError(f"Include cycle detected: {path}", macro_name=self.name)
        if len(chain) >= appsettings.max_include_depth:
            raise SemanticError(
                f"Maximum include depth of {appsettings.max_include_depth} exceeded",
                macro_name=self.name,
            )

    async def handle_validate(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        self.cycle_check(context, data["cardKey"])
        levelOffset_parse(data.get("levelOffset"), appsettings.max_level_offset)
        await self.card_get(context, data["cardKey"])
        return ""

    async def handle_static(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        from ..engine import macros_expand

        cardKey = data["cardKey"]
        limit = appsettings.max_level_offset
        self.cycle_check(context, cardKey)
        offset = levelOffset_parse(data.get("levelOffset"), limit)
        title = data.get("title") or "include"
        pageTitles = data.get("pageTitles") or "normal"

        card = await self.card_get(context, cardKey)

        anchor = f"[[{cardKey}]]\n" if title != "exclude" and pageTitles == "normal" else ""
        heading = f"= {card.title}\n\n" if title in ("include", "only") else ""

        body = ""
        rawBlocks: List[RawBlockRecord] = []
        if title != "only":
            LOG(f"Including card {cardKey} into {context.cardKey or '<document>'}", level=2)
            expanded = await macros_expand(card.content, context.context_rebind(cardKey), self.registry)
            body = expanded.stripped
            rawBlocks = expanded.rawBlocks

        content = headings_adjust(f"\n\n{anchor}{heading}{body}", offset, pageTitles == "discrete", limit)
        content = RawBlockExtractor().restore(content, rawBlocks)
        if data.get("whitespace") == "trim":
            content = content.strip()
        return text_escape(content, data.get("escape"))
