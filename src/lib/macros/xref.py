"""xref macro: cross reference to another card"""

from typing import Any, Dict

from ...models.context import GenerationContext
from ...models.macros import MacroMetadata
from .base import BaseMacro


class XrefMacro(BaseMacro):
    metadata = MacroMetadata(name="xref", tagName="xref-macro", schemaId="xrefMacroSchema")

    async def handle_validate(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        await self.card_get(context, data["cardKey"])
        return ""

    async def handle_static(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        # Exported documents contain every card, so an in-document anchor is enough
        await self.card_get(context, data["cardKey"])
        return f"<<{data['cardKey']}>>"

    async def handle_inject(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        card = await self.card_get(context, data["cardKey"])
        return f"xref:{data['cardKey']}.adoc[{card.title}]"
