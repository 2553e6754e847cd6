"""
Directive runtime for {{#name}}body{{/name}} blocks

A synchronous block-template executor. Handlers are registered by name and
called once per directive with the raw body text and the directive's source
line; whatever they return replaces the directive in the output. The runtime
never awaits: macros that need asynchronous work return a placeholder and
queue the work elsewhere (see engine.py).

Key features:
- Single left-to-right pass; handler output is never rescanned
- Text that is not a {{#name}} opener passes through untouched
- Unknown names and unclosed blocks raise ParseError for that directive only
- Bodies reach handlers unexpanded; a handler may render directives nested
  in its body through the same runtime
- Line numbers resolved through a caller-supplied position mapper, so raw
  block extraction does not skew diagnostics

Example:
    >>> runtime = DirectiveRuntime()
    >>> runtime.handler_register("shout", lambda body, line: body.upper())
    >>> runtime.render("say {{#shout}}hi{{/shout}}!")
    'say HI!'
"""

import json
import re
from typing import Any, Callable, Dict, List, Optional

from ..models.errors import MacroError, ParseError
from ..models.parser import DirectiveMatch
from .log import LOG

BlockHandler = Callable[[str, int], str]
ErrorHandler = Callable[[MacroError, str], str]
LineMapper = Callable[[int], int]

OPENER = re.compile(r"\{\{#([A-Za-z_][\w-]*)\}\}")


def body_parse(body: str, line: int = 1) -> Dict[str, Any]:
    """
    Parse a directive body as an inline JSON key/value list

    The body is the inside of a JSON object; braces are added before
    decoding. An empty or whitespace-only body means no options.

    Args:
        body: Text between the opener and the closing marker
        line: Source line of the opener, used for error locations

    Returns:
        Parsed options dict

    Raises:
        ParseError: body is not a valid key/value fragment; the line points
                    at the offending line of the body. NaN and Infinity
                    are rejected like any other non-JSON token.

    Example:
        >>> body_parse('"title": "T", "value": 85')
        {'title': 'T', 'value': 85}
    """
    if not body.strip():
        return {}

    def constant_reject(name: str) -> Any:
        raise ParseError(f"Invalid macro body: {name} is not a JSON value", line=line)

    try:
        return json.loads("{" + body + "}", parse_constant=constant_reject)
    except json.JSONDecodeError as error:
        column = error.colno - 1 if error.lineno == 1 else error.colno
        raise ParseError(
            f"Invalid macro body: {error.msg} (column {column})",
            line=line + error.lineno - 1,
        ) from error


def _error_raise(error: MacroError, name: str) -> str:
    raise error


class DirectiveRuntime:
    """
    Registry of block handlers plus the rendering pass

    One runtime is created per evaluation so handlers can be bound to that
    evaluation's context and task queue.
    """

    def __init__(self) -> None:
        self.handlers: Dict[str, BlockHandler] = {}

    def handler_register(self, name: str, handler: BlockHandler) -> None:
        """Register (or replace) the handler for a directive name"""
        self.handlers[name] = handler

    def handler_get(self, name: str) -> Optional[BlockHandler]:
        return self.handlers.get(name)

    def directive_find(self, source: str, position: int) -> Optional[DirectiveMatch]:
        """
        Find the next {{#name}} opener at or after position

        Returns:
            DirectiveMatch with name, opener position and body start, or None
        """
        match = OPENER.search(source, position)
        if not match:
            return None
        return DirectiveMatch(name=match.group(1), position=match.start(), bodyStart=match.end())

    def close_find(self, source: str, match: DirectiveMatch) -> int:
        """
        Position of the matching {{/name}}, or -1 when the block is unclosed

        Openers of the same name inside the body are counted, so a directive
        nested in another of its own kind closes at the right marker.
        """
        opener = f"{{{{#{match.name}}}}}"
        closer = f"{{{{/{match.name}}}}}"
        depth = 1
        position = match.bodyStart
        while True:
            close = source.find(closer, position)
            if close == -1:
                return -1
            nested = source.find(opener, position, close)
            if nested != -1:
                depth += 1
                position = nested + len(opener)
                continue
            depth -= 1
            if depth == 0:
                return close
            position = close + len(closer)

    def render(
        self,
        source: str,
        on_error: Optional[ErrorHandler] = None,
        line_of: Optional[LineMapper] = None,
    ) -> str:
        """
        Run every directive in source through its handler

        Args:
            source: Text to render (raw blocks already extracted)
            on_error: Called with (error, directive name) when a directive
                      fails; its return value replaces the directive. When
                      omitted the error propagates.
            line_of: Maps a position in source to a 1-based source line

        Returns:
            Source with every directive replaced by its handler's output
        """
        on_error = on_error or _error_raise
        if line_of is None:
            def line_of(position: int) -> int:
                return source.count("\n", 0, position) + 1

        parts: List[str] = []
        position = 0
        count = 0

        while True:
            match = self.directive_find(source, position)
            if match is None:
                break

            parts.append(source[position:match.position])
            line = line_of(match.position)
            count += 1

            handler = self.handler_get(match.name)
            if handler is None:
                parts.append(on_error(ParseError(f"Unknown macro '{match.name}'", line=line), match.name))
                position = match.bodyStart
                continue

            close_position = self.close_find(source, match)
            if close_position == -1:
                parts.append(
                    on_error(
                        ParseError(f"Macro '{match.name}' is missing its closing tag", line=line),
                        match.name,
                    )
                )
                position = match.bodyStart
                continue

            body = source[match.bodyStart:close_position]
            try:
                parts.append(handler(body, line))
            except MacroError as error:
                error.locate(line=line)
                if error.macro_name is None:
                    error.macro_name = match.name
                parts.append(on_error(error, match.name))

            position = close_position + len(match.name) + 5  # len("{{/}}")

        parts.append(source[position:])
        if count:
            LOG(f"Rendered {count} directive(s)", level=3)
        return "".join(parts)
