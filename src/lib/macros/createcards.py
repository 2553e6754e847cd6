"""
createCards macro: a button that creates cards from a template

Only meaningful in the live client. inject emits a <create-cards> element
the client hydrates; exported documents leave nothing behind.
"""

from typing import Any, Dict

from ...models.context import GenerationContext
from ...models.macros import MacroMetadata
from ..serialize import htmlPlaceholder_create, passthrough_create
from .base import BaseMacro


class CreateCardsMacro(BaseMacro):
    metadata = MacroMetadata(name="createCards", tagName="create-cards", schemaId="createCardsMacroSchema")

    async def handle_static(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        return ""

    async def handle_inject(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        options = dict(data)
        if not options.get("cardKey"):
            options["cardKey"] = context.cardKey
        return passthrough_create(htmlPlaceholder_create(self.metadata, options, context.counter))

    async def handle_staticSite(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        return await self.handle_static(context, data)
