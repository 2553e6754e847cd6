"""
cardmacros - Document macro expansion engine

Expands {{#name}}...{{/name}} macros embedded in AsciiDoc card content into
static AsciiDoc, interactive placeholders or validation results.
"""

__version__ = "1.0.0"

from .lib import (
    LOG,
    MacroRegistry,
    admonition_create,
    cards_validate,
    htmlPlaceholder_create,
    macro_create,
    macroContent_validate,
    macros_evaluate,
    state_connectToLogger,
)
from .models import GenerationContext, MacroError, MemoryProject, Mode

__all__ = [
    "LOG",
    "MacroRegistry",
    "admonition_create",
    "cards_validate",
    "htmlPlaceholder_create",
    "macro_create",
    "macroContent_validate",
    "macros_evaluate",
    "state_connectToLogger",
    "GenerationContext",
    "MacroError",
    "MemoryProject",
    "Mode",
    "__version__",
]
