"""
Generation context and placeholder counter

GenerationContext is the state bus of an evaluation: it travels unchanged
through the whole call tree, except that include rebinds cardKey (and grows
includeChain) when it recurses into another card.
"""

import itertools
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Tuple, Union, TYPE_CHECKING

from .macros import Mode
from .store import AttachmentStore, DocumentStore

if TYPE_CHECKING:
    from ..lib.schema import SchemaValidator


class PlaceholderCounter:
    """
    Monotonic source of placeholder key numbers

    One process-wide instance (DEFAULT_COUNTER) is used unless a context
    carries its own. Numbers only have to be unique, never reset.
    """

    def __init__(self, start: int = 0) -> None:
        self._numbers = itertools.count(start)
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            return next(self._numbers)


DEFAULT_COUNTER = PlaceholderCounter()


def _verbosity_default() -> int:
    from ..config import appsettings
    return appsettings.verbosity


@dataclass
class GenerationContext:
    """
    Everything a macro handler may consult while generating output

    Attributes:
        mode: Rendering target; plain strings ("inject") are accepted
        cardKey: Key of the card whose content is being evaluated
        project: Card store used to resolve card keys
        rendererContext: Opaque value passed through for the caller's renderer
        attachments: Attachment store; falls back to project when it can read
                     attachments itself
        validator: Schema validator override (defaults to the built-in one)
        counter: Placeholder key counter (defaults to the process-wide one)
        includeChain: Keys of the cards currently being included, outermost first
        verbosity: LOG() verbosity for this evaluation (1-3)
    """

    mode: Union[Mode, str]
    cardKey: str = ""
    project: Optional[DocumentStore] = None
    rendererContext: Any = None
    attachments: Optional[AttachmentStore] = None
    validator: Optional["SchemaValidator"] = None
    counter: PlaceholderCounter = field(default=DEFAULT_COUNTER)
    includeChain: Tuple[str, ...] = field(default=())
    verbosity: int = field(default_factory=_verbosity_default)

    def __post_init__(self) -> None:
        self.mode = Mode(self.mode)

    def context_rebind(self, cardKey: str) -> "GenerationContext":
        """
        Context for evaluating another card's content inside this one

        The current card joins includeChain so cycles can be detected.
        """
        chain = self.includeChain
        if self.cardKey:
            chain = chain + (self.cardKey,)
        return replace(self, cardKey=cardKey, includeChain=chain)

    def attachmentStore_get(self) -> Optional[AttachmentStore]:
        """Attachment store to use: explicit one first, then the project"""
        if self.attachments is not None:
            return self.attachments
        if isinstance(self.project, AttachmentStore):
            return self.project
        return None

    @property
    def validating(self) -> bool:
        return self.mode is Mode.VALIDATE
