"""
Models package for cardmacros

Contains data structures and type definitions for the macro evaluation pipeline.
"""

from .macros import Mode, MacroMetadata, RawBlockRecord, PlaceholderRecord
from .context import GenerationContext, PlaceholderCounter, DEFAULT_COUNTER
from .store import (
    AttachmentData,
    AttachmentInfo,
    AttachmentStore,
    Document,
    DocumentStore,
    MemoryProject,
)
from .errors import (
    MacroError,
    NotFoundError,
    ParameterError,
    ParseError,
    RawBlockError,
    SchemaError,
    SemanticError,
)

__all__ = [
    "Mode",
    "MacroMetadata",
    "RawBlockRecord",
    "PlaceholderRecord",
    "GenerationContext",
    "PlaceholderCounter",
    "DEFAULT_COUNTER",
    "AttachmentData",
    "AttachmentInfo",
    "AttachmentStore",
    "Document",
    "DocumentStore",
    "MemoryProject",
    "MacroError",
    "NotFoundError",
    "ParameterError",
    "ParseError",
    "RawBlockError",
    "SchemaError",
    "SemanticError",
]
