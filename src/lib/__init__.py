"""
cardmacros.lib - macro evaluation pipeline

Raw block extraction, the directive runtime, the task queue, the macro
implementations and the engine that ties them together.
"""

from .engine import cards_validate, macros_evaluate, macros_expand
from .log import LOG, state_connectToLogger
from .macros import BaseMacro, MacroRegistry, macro_registry
from .rawblocks import RawBlockExtractor
from .runtime import DirectiveRuntime, body_parse
from .schema import SchemaValidator, default_validator
from .serialize import (
    admonition_create,
    htmlPlaceholder_create,
    macro_create,
    macroContent_validate,
    passthrough_create,
)
from .taskqueue import MacroTask, TaskQueue

__all__ = [
    "cards_validate",
    "macros_evaluate",
    "macros_expand",
    "LOG",
    "state_connectToLogger",
    "BaseMacro",
    "MacroRegistry",
    "macro_registry",
    "RawBlockExtractor",
    "DirectiveRuntime",
    "body_parse",
    "SchemaValidator",
    "default_validator",
    "admonition_create",
    "htmlPlaceholder_create",
    "macro_create",
    "macroContent_validate",
    "passthrough_create",
    "MacroTask",
    "TaskQueue",
]
