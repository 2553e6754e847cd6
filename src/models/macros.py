"""
Macro metadata and record models

Immutable structures created and consumed within a single evaluation:
metadata describing each macro kind, raw block records from extraction,
and placeholder records from the synchronous directive pass.
"""

import html
from enum import Enum
from dataclasses import dataclass, field
from typing import Dict


class Mode(str, Enum):
    """
    Rendering target of an evaluation

    Selects which handler of each macro runs.
    """
    VALIDATE = "validate"       # pre-flight check, every error propagates
    STATIC = "static"           # self-contained AsciiDoc (export, PDF)
    INJECT = "inject"           # live client rendering with interactive elements
    STATIC_SITE = "staticSite"  # whole-site static export


@dataclass(frozen=True)
class MacroMetadata:
    """
    Identity of one macro kind

    Attributes:
        name: Name used in content ({{#name}}...{{/name}})
        tagName: HTML element name; kept separate since tags cannot contain
                 uppercase letters
        schemaId: Identifier of the schema that validates the macro body

    Example:
        MacroMetadata(name="scoreCard", tagName="score-card", schemaId="scoreCardMacroSchema")
    """
    name: str
    tagName: str
    schemaId: str


@dataclass(frozen=True)
class RawBlockRecord:
    """
    A literal passthrough region removed before macro evaluation

    Attributes:
        token: Sentinel that replaced the region in the stripped source
        literalText: Text between the raw markers, exactly as written
        startLine: 1-based line of the opening marker
        endLine: 1-based line of the closing marker
    """
    token: str
    literalText: str
    startLine: int
    endLine: int

    @property
    def lines_spanned(self) -> int:
        """Number of newlines the region removed from the source"""
        return self.endLine - self.startLine


@dataclass(frozen=True)
class PlaceholderRecord:
    """
    Temporary stand-in for a directive between the two evaluation passes

    Attributes:
        key: Unique placeholder key (e.g., "macro-12")
        macroName: Name of the macro the placeholder stands for
        tagName: Element name used when rendering the tag
        flattenedAttributes: Primitive fields of the validated data, nested
                             objects flattened to dotted names
        base64Options: Base64 of the JSON encoding of the validated data

    Example:
        For scoreCard data {"title": "Open", "value": 3}:
        <score-card title="Open" value="3" key="macro-0" options="eyJ0aXRsZSI6..."/>
    """
    key: str
    macroName: str
    tagName: str
    flattenedAttributes: Dict[str, str] = field(default_factory=dict)
    base64Options: str = ""

    @property
    def tag(self) -> str:
        """Render the self-closing placeholder element"""
        attributes = [
            f'{name}="{html.escape(value, quote=True)}"'
            for name, value in self.flattenedAttributes.items()
        ]
        attributes.append(f'key="{self.key}"')
        attributes.append(f'options="{self.base64Options}"')
        return f"<{self.tagName} {' '.join(attributes)}/>"
