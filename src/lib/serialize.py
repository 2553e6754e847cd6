"""
Serialization helpers for macro output

Pure functions shared by the engine and the macro implementations:
AsciiDoc admonitions and passthrough blocks, placeholder tags, directive
source generation and the single schema-check entry point.
"""

import base64
import json
from typing import Any, Dict, Mapping, Optional

from ..models.context import DEFAULT_COUNTER, PlaceholderCounter
from ..models.errors import SchemaError
from ..models.macros import MacroMetadata, PlaceholderRecord
from ..config import appsettings


def admonition_create(kind: str, title: str, content: str) -> str:
    """
    Create an AsciiDoc admonition block

    Args:
        kind: Admonition type (WARNING, NOTE, TIP, IMPORTANT, CAUTION)
        title: Block title
        content: Block body

    Returns:
        The admonition followed by a blank line

    Example:
        >>> admonition_create("WARNING", "Macro Error", "Error: boom")
        '[WARNING]\\n.Macro Error\\n====\\nError: boom\\n====\\n\\n'
    """
    return f"[{kind}]\n.{title}\n====\n{content}\n====\n\n"


def passthrough_create(content: str) -> str:
    """
    Wrap HTML in an AsciiDoc passthrough block

    Starts with a line break so the ++++ delimiter is always on its own line.
    """
    return f"\n++++\n{content}\n++++\n"


def image_create(mimeType: str, data: str, attributes: str = "") -> str:
    """AsciiDoc block image embedding base64 data as a data URI"""
    return f"image::data:{mimeType};base64,{data}[{attributes}]"


def json_dump(data: Any) -> str:
    """Compact JSON encoding used for placeholder options"""
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def options_encode(data: Any) -> str:
    """Base64 of the compact JSON encoding of data"""
    return base64.b64encode(json_dump(data).encode("utf-8")).decode("ascii")


def options_decode(encoded: str) -> Any:
    """Inverse of options_encode"""
    return json.loads(base64.b64decode(encoded).decode("utf-8"))


def attributes_flatten(data: Mapping[str, Any], prefix: str = "") -> Dict[str, str]:
    """
    Flatten data into attribute name/value pairs

    Nested objects become dotted names, lists are written as JSON text,
    null values are dropped.

    Example:
        >>> attributes_flatten({"a": 1, "b": {"c": {"d": "deep"}}, "e": True})
        {'a': '1', 'b.c.d': 'deep', 'e': 'true'}
    """
    attributes: Dict[str, str] = {}
    for key, value in data.items():
        name = f"{prefix}{key}"
        if value is None:
            continue
        if isinstance(value, Mapping):
            attributes.update(attributes_flatten(value, prefix=f"{name}."))
        elif isinstance(value, str):
            attributes[name] = value
        else:
            attributes[name] = json_dump(value)
    return attributes


def placeholder_create(
    metadata: MacroMetadata,
    data: Mapping[str, Any],
    counter: Optional[PlaceholderCounter] = None,
) -> PlaceholderRecord:
    """
    Allocate a placeholder key and build the record for one macro invocation

    Args:
        metadata: Macro the placeholder stands for
        data: Validated macro options
        counter: Key source; the process-wide counter when omitted

    Returns:
        PlaceholderRecord whose tag carries the flattened attributes, the key
        and the base64 options
    """
    counter = counter or DEFAULT_COUNTER
    return PlaceholderRecord(
        key=appsettings.placeholderKey_make(counter.next()),
        macroName=metadata.name,
        tagName=metadata.tagName,
        flattenedAttributes=attributes_flatten(data),
        base64Options=options_encode(dict(data)),
    )


def htmlPlaceholder_create(
    metadata: MacroMetadata,
    data: Mapping[str, Any],
    counter: Optional[PlaceholderCounter] = None,
) -> str:
    """
    Create a self-closing element named after the macro's tag

    Example:
        >>> meta = MacroMetadata("testName", "test-tag-name", "test-schema")
        >>> htmlPlaceholder_create(meta, {"test": "test-data"})
        '<test-tag-name test="test-data" key="macro-0" options="eyJ0ZXN0IjoidGVzdC1kYXRhIn0="/>'
    """
    return placeholder_create(metadata, data, counter).tag


def macro_create(name: str, options: Mapping[str, Any]) -> str:
    """
    Write directive source for a macro invocation

    The body is the JSON object without its outer braces. Any "{{" inside a
    string value is written as "{\\u007b", so the body can never contain a
    closing or raw marker; JSON decoding turns it back into "{{".

    Example:
        >>> macro_create("xref", {"cardKey": "c1"})
        '{{#xref}}"cardKey": "c1"{{/xref}}'
        >>> macro_create("createCards", {})
        '{{#createCards}}{{/createCards}}'
    """
    body = json.dumps(dict(options), ensure_ascii=False)[1:-1]
    body = body.replace("{{", "{\\u007b")
    return f"{{{{#{name}}}}}{body}{{{{/{name}}}}}"


def macroContent_validate(metadata: MacroMetadata, data: Any, validator=None) -> Any:
    """
    Validate parsed macro options against the macro's schema

    Every macro goes through this function for its schema check.

    Args:
        metadata: Macro being validated
        data: Parsed directive body
        validator: Validator override; the built-in SchemaValidator when omitted

    Returns:
        The validated data

    Raises:
        SchemaError: The macro has no schema, or data does not conform
    """
    if not metadata.schemaId:
        raise SchemaError(f"Macro {metadata.name} does not have a schema", macro_name=metadata.name)

    if validator is None:
        from .schema import default_validator
        validator = default_validator

    try:
        return validator.validate(metadata.schemaId, data)
    except SchemaError as error:
        raise SchemaError(
            f"{metadata.name} macro JSON validation error: {error.message}",
            line=error.line,
            macro_name=metadata.name,
        ) from error
