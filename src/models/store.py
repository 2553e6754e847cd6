"""
Store interfaces consumed by the macro engine

The card store and the attachment store live outside this package; the
engine only talks to them through the two protocols below. MemoryProject
implements both over plain dicts for embedding and tests.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable

from .errors import NotFoundError


@dataclass(frozen=True)
class AttachmentInfo:
    """
    Attachment listed on a card

    Attributes:
        fileName: File name, unique within the card
        mimeType: MIME type reported by the store (e.g., "image/png")
    """
    fileName: str
    mimeType: str = "application/octet-stream"


@dataclass(frozen=True)
class AttachmentData:
    """Bytes and MIME type of one attachment"""
    data: bytes
    mimeType: str


@dataclass
class Document:
    """
    A card as returned by the document store

    Attributes:
        key: Card key (e.g., "decision_12")
        title: Card title from metadata
        content: AsciiDoc body, possibly containing macros
        attachments: Attachments listed on the card
    """
    key: str
    title: str = ""
    content: str = ""
    attachments: List[AttachmentInfo] = field(default_factory=list)

    def attachment_find(self, fileName: str) -> Optional[AttachmentInfo]:
        """Return the listed attachment with this file name, or None"""
        for attachment in self.attachments:
            if attachment.fileName == fileName:
                return attachment
        return None


@runtime_checkable
class DocumentStore(Protocol):
    """Key -> card lookup; raises NotFoundError for unknown keys"""

    async def card_find(self, key: str) -> Document:
        ...


@runtime_checkable
class AttachmentStore(Protocol):
    """(card key, file name) -> bytes lookup; raises NotFoundError when missing"""

    async def attachment_read(self, cardKey: str, fileName: str) -> AttachmentData:
        ...


class MemoryProject:
    """
    In-memory card and attachment store

    Example:
        >>> project = MemoryProject()
        >>> project.card_add("c1", "First", "= Heading\\nBody")
        >>> project.attachment_add("c1", "logo.png", b"...", "image/png")
    """

    def __init__(self) -> None:
        self.cards: Dict[str, Document] = {}
        self.blobs: Dict[Tuple[str, str], AttachmentData] = {}

    def card_add(self, key: str, title: str = "", content: str = "") -> Document:
        """Add or replace a card"""
        document = Document(key=key, title=title, content=content)
        previous = self.cards.get(key)
        if previous is not None:
            document.attachments = list(previous.attachments)
        self.cards[key] = document
        return document

    def attachment_add(
        self, cardKey: str, fileName: str, data: bytes, mimeType: str = "application/octet-stream"
    ) -> None:
        """Attach bytes to an existing card"""
        document = self.cards.get(cardKey)
        if document is None:
            raise NotFoundError(f"Card key {cardKey} not found")
        document.attachments = [a for a in document.attachments if a.fileName != fileName]
        document.attachments.append(AttachmentInfo(fileName=fileName, mimeType=mimeType))
        self.blobs[(cardKey, fileName)] = AttachmentData(data=data, mimeType=mimeType)

    def card_remove(self, key: str) -> None:
        self.cards.pop(key, None)
        for blob_key in [k for k in self.blobs if k[0] == key]:
            del self.blobs[blob_key]

    def keys(self) -> List[str]:
        return sorted(self.cards)

    async def card_find(self, key: str) -> Document:
        document = self.cards.get(key)
        if document is None:
            raise NotFoundError(f"Card key {key} not found")
        return document

    async def attachment_read(self, cardKey: str, fileName: str) -> AttachmentData:
        blob = self.blobs.get((cardKey, fileName))
        if blob is None:
            raise NotFoundError(f"Attachment file '{fileName}' not found in card '{cardKey}'")
        return blob
