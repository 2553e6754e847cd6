"""percentage macro: a donut chart with a title and legend"""

from typing import Any, Dict

from ...models.context import GenerationContext
from ...models.macros import MacroMetadata
from ..serialize import passthrough_create
from ..svg import percentage_svg
from .base import BaseMacro


class PercentageMacro(BaseMacro):
    metadata = MacroMetadata(name="percentage", tagName="percentage-macro", schemaId="percentageMacroSchema")

    async def handle_static(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        return passthrough_create(
            percentage_svg(
                title=data["title"],
                value=data["value"],
                legend=data["legend"],
                colour=data.get("colour"),
            )
        )
