"""
Macro implementations and their registry

Each macro kind lives in its own module and subclasses BaseMacro. The
registry maps directive names to macro instances; the engine binds every
registered macro to a fresh DirectiveRuntime per evaluation.
"""

from typing import Dict, List, Optional

from .base import BaseMacro
from .createcards import CreateCardsMacro
from .image import ImageMacro
from .include import IncludeMacro
from .percentage import PercentageMacro
from .report import ReportMacro
from .scorecard import ScoreCardMacro
from .vega import VegaLiteMacro, VegaMacro
from .xref import XrefMacro


class MacroRegistry:
    """
    Registry of macro implementations keyed by directive name

    Built-in macros are registered on construction; pass builtins=False for
    an empty registry.
    """

    def __init__(self, builtins: bool = True) -> None:
        self.macros: Dict[str, BaseMacro] = {}
        if builtins:
            self.builtinMacros_register()

    def register(self, macro: BaseMacro) -> None:
        """Register a macro under its metadata name, replacing any previous one"""
        self.macros[macro.metadata.name] = macro

    def get(self, name: str) -> Optional[BaseMacro]:
        return self.macros.get(name)

    def names(self) -> List[str]:
        return sorted(self.macros)

    def builtinMacros_register(self) -> None:
        """Register every built-in macro"""
        self.register(CreateCardsMacro())
        self.register(ScoreCardMacro())
        self.register(PercentageMacro())
        self.register(IncludeMacro(registry=self))
        self.register(XrefMacro())
        self.register(ImageMacro())
        self.register(ReportMacro())
        vega = VegaMacro()
        self.register(vega)
        self.register(VegaLiteMacro(vega))


# Shared default registry
macro_registry = MacroRegistry()

__all__ = [
    "BaseMacro",
    "CreateCardsMacro",
    "ImageMacro",
    "IncludeMacro",
    "MacroRegistry",
    "PercentageMacro",
    "ReportMacro",
    "ScoreCardMacro",
    "VegaLiteMacro",
    "VegaMacro",
    "XrefMacro",
    "macro_registry",
]
