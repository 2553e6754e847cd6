"""
Macro error taxonomy

Every failure the engine can report derives from MacroError so callers can
catch the whole family at once. In validate mode these propagate to the
caller; in the rendering modes all but RawBlockError are turned into an
inline "Macro Error" admonition by the engine.
"""

from typing import Optional


class MacroError(Exception):
    """
    Base class for macro evaluation failures

    Attributes:
        message: Human-readable description without location suffix
        line: 1-based source line of the offending directive, if known
        card_key: Key of the card being evaluated, if known
        macro_name: Name of the macro that failed, if known
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        card_key: Optional[str] = None,
        macro_name: Optional[str] = None,
    ) -> None:
        self.message = message
        self.line = line
        self.card_key = card_key
        self.macro_name = macro_name
        super().__init__(self.describe())

    def describe(self) -> str:
        """Message with the line suffix appended when the line is known"""
        if self.line is not None:
            return f"{self.message} at line {self.line}"
        return self.message

    def locate(self, line: Optional[int] = None, card_key: Optional[str] = None) -> "MacroError":
        """
        Fill in location details that were unknown where the error was raised

        Existing values win; the exception is updated in place and returned
        so it can be re-raised directly.
        """
        if self.line is None and line is not None:
            self.line = line
        if self.card_key is None and card_key is not None:
            self.card_key = card_key
        self.args = (self.describe(),)
        return self


class SchemaError(MacroError):
    """Directive body does not satisfy the macro's schema"""


class SemanticError(MacroError):
    """A referenced entity (card, attachment, xref target) does not exist"""


class ParameterError(MacroError):
    """A parameter passed schema validation but its value is unusable"""


class ParseError(MacroError):
    """Directive is malformed: unknown name, unclosed block or unparsable body"""


class RawBlockError(MacroError):
    """Raw block markers are nested, unclosed or unbalanced"""


class NotFoundError(LookupError):
    """Raised by document and attachment stores for unknown keys"""
