"""
Base class for macro implementations

A macro is a MacroMetadata plus one coroutine per mode. Subclasses override
the handlers they care about; the rest fall back along the chain
staticSite -> inject -> static, while validate does nothing by default.
"""

from typing import Any, Awaitable, Callable, Dict

from ...models.context import GenerationContext
from ...models.errors import NotFoundError, SemanticError
from ...models.macros import MacroMetadata, Mode
from ...models.store import Document
from ..serialize import macroContent_validate

ModeHandler = Callable[[GenerationContext, Dict[str, Any]], Awaitable[str]]


class BaseMacro:
    """
    Common behaviour of all macros

    Subclasses set `metadata` and implement at least handle_static().
    """

    metadata: MacroMetadata

    @property
    def name(self) -> str:
        return self.metadata.name

    def validate(self, context: GenerationContext, data: Any) -> Dict[str, Any]:
        """Schema check of a parsed directive body, using the context's validator"""
        return macroContent_validate(self.metadata, data, context.validator)

    def handler_select(self, mode: Mode) -> ModeHandler:
        """Handler coroutine function for a rendering mode"""
        handlers = {
            Mode.VALIDATE: self.handle_validate,
            Mode.STATIC: self.handle_static,
            Mode.INJECT: self.handle_inject,
            Mode.STATIC_SITE: self.handle_staticSite,
        }
        return handlers[Mode(mode)]

    async def handle(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        """Run the handler for the context's mode"""
        return await self.handler_select(context.mode)(context, data)

    async def handle_validate(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        return ""

    async def handle_static(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        raise NotImplementedError(f"{self.name} macro has no static handler")

    async def handle_inject(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        return await self.handle_static(context, data)

    async def handle_staticSite(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        return await self.handle_inject(context, data)

    async def card_get(self, context: GenerationContext, cardKey: str) -> Document:
        """
        Look a card up in the context's project

        Raises:
            SemanticError: no project, or the card does not exist
        """
        if context.project is None:
            raise SemanticError(f"Card key {cardKey} not found", macro_name=self.name)
        try:
            return await context.project.card_find(cardKey)
        except NotFoundError as error:
            raise SemanticError(f"Card key {cardKey} not found", macro_name=self.name) from error
