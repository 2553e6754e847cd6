"""scoreCard macro: a single headline number as an SVG card"""

from typing import Any, Dict

from ...models.context import GenerationContext
from ...models.macros import MacroMetadata
from ..serialize import passthrough_create
from ..svg import scoreCard_svg
from .base import BaseMacro


class ScoreCardMacro(BaseMacro):
    metadata = MacroMetadata(name="scoreCard", tagName="score-card", schemaId="scoreCardMacroSchema")

    async def handle_static(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        return passthrough_create(
            scoreCard_svg(
                value=data["value"],
                title=data.get("title"),
                unit=data.get("unit"),
                legend=data.get("legend"),
            )
        )
