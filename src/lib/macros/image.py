"""
image macro: an image attached to a card

Static output embeds the bytes as a data URI so the document stands alone.
The live client and static sites link to the attachment endpoint instead.
"""

import base64
from typing import Any, Dict

from ...models.context import GenerationContext
from ...models.errors import NotFoundError, SemanticError
from ...models.macros import MacroMetadata
from ...models.store import AttachmentInfo
from ..serialize import image_create
from .base import BaseMacro


def attribute_quote(value: str) -> str:
    """Double-quoted AsciiDoc attribute value; inner quotes are backslash escaped"""
    return '"' + str(value).replace('"', '\\"') + '"'


def attributes_build(data: Dict[str, Any]) -> str:
    """
    AsciiDoc image attribute list from the alt and title options

    Example:
        >>> attributes_build({"fileName": "a.png", "alt": "Logo", "title": "Our logo"})
        'alt="Logo",title="Our logo"'
    """
    attributes = []
    if data.get("alt") is not None:
        attributes.append(f"alt={attribute_quote(data['alt'])}")
    if data.get("title") is not None:
        attributes.append(f"title={attribute_quote(data['title'])}")
    return ",".join(attributes)


class ImageMacro(BaseMacro):
    metadata = MacroMetadata(name="image", tagName="image-macro", schemaId="imageMacroSchema")

    async def attachment_get(self, context: GenerationContext, cardKey: str, fileName: str) -> AttachmentInfo:
        """Attachment listed on the card, or SemanticError"""
        card = await self.card_get(context, cardKey)
        attachment = card.attachment_find(fileName)
        if attachment is None:
            raise SemanticError(
                f"Attachment file '{fileName}' not found in card '{cardKey}'",
                macro_name=self.name,
            )
        return attachment

    async def handle_validate(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        await self.attachment_get(context, data.get("cardKey") or context.cardKey, data["fileName"])
        return ""

    async def handle_static(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        cardKey = data.get("cardKey") or context.cardKey
        fileName = data["fileName"]
        attachment = await self.attachment_get(context, cardKey, fileName)

        store = context.attachmentStore_get()
        if store is None:
            raise SemanticError(
                f"Attachment file '{fileName}' not found in card '{cardKey}'",
                macro_name=self.name,
            )
        try:
            blob = await store.attachment_read(cardKey, fileName)
        except NotFoundError as error:
            raise SemanticError(
                f"Attachment file '{fileName}' not found in card '{cardKey}'",
                macro_name=self.name,
            ) from error

        encoded = base64.b64encode(blob.data).decode("ascii")
        return image_create(blob.mimeType or attachment.mimeType, encoded, attributes_build(data))

    async def handle_inject(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        cardKey = data.get("cardKey") or context.cardKey
        await self.attachment_get(context, cardKey, data["fileName"])
        return f"image::/api/cards/{cardKey}/a/{data['fileName']}[{attributes_build(data)}]"
