"""
Macro evaluation engine

Two-phase evaluation of a document:

    1. Extract raw blocks (RawBlockExtractor)
    2. Synchronous directive pass (DirectiveRuntime): each directive's body is
       parsed and schema-checked, then replaced by a placeholder tag while
       the mode handler is queued as a producer (TaskQueue). Directives
       nested in a body are queued first; the outer producer waits for
       their results before it parses its body
    3. Drain the queue concurrently
    4. Substitute every placeholder tag with its producer's result
    5. Restore raw blocks

Errors in validate mode propagate to the caller. Every other mode renders
them inline as a "Macro Error" admonition and carries on; only raw block
errors always propagate, since the document structure itself is unusable.

Example:
    >>> project = MemoryProject()
    >>> project.card_add("c1", "First card")
    >>> context = GenerationContext(mode="inject", project=project)
    >>> await macros_evaluate('See {{#xref}}"cardKey": "c1"{{/xref}}', context)
    'See xref:c1.adoc[First card]'
"""

import functools
import re
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..models.context import GenerationContext
from ..models.errors import MacroError, NotFoundError, RawBlockError
from ..models.macros import Mode
from ..models.parser import ExtractedSource
from .log import LOG, LOG_exception, state_connectToLogger
from .macros import BaseMacro, MacroRegistry, macro_registry
from .rawblocks import RawBlockExtractor
from .runtime import OPENER, BlockHandler, DirectiveRuntime, body_parse
from .serialize import admonition_create, placeholder_create
from .taskqueue import MacroTask, TaskQueue

BodyRenderer = Callable[[str, int], str]


def error_render(error: BaseException) -> str:
    """Inline admonition shown in place of a failed macro"""
    message = error.describe() if isinstance(error, MacroError) else str(error)
    return admonition_create("WARNING", "Macro Error", f"Error: {message}")


def directive_bind(
    macro: BaseMacro,
    context: GenerationContext,
    queue: TaskQueue,
    body_render: Optional[BodyRenderer] = None,
) -> BlockHandler:
    """
    Runtime block handler for one macro, bound to an evaluation

    The handler parses and validates the body, queues the mode handler and
    returns the placeholder tag that stands in for the result.

    A body holding directives of its own is first passed to body_render,
    which queues the nested directives and leaves their tags in the body.
    Parsing and validation then wait in the queued producer until every
    nested result is known and spliced in.
    """

    def directive_handle(body: str, line: int) -> str:
        start = len(queue)
        if body_render is not None and OPENER.search(body):
            body = body_render(body, line)
        dependencies = queue.tasks[start:]

        if not dependencies:
            data = body_parse(body, line)
            data = macro.validate(context, data)
            record = placeholder_create(macro.metadata, data, context.counter)
            producer = functools.partial(macro.handle, context, data)
        else:
            record = placeholder_create(macro.metadata, {}, context.counter)
            producer = functools.partial(dependent_produce, body, line, dependencies)

        queue.push(
            MacroTask(
                key=record.key,
                tag=record.tag,
                macroName=macro.name,
                producer=producer,
                line=line,
            )
        )
        return record.tag

    async def dependent_produce(body: str, line: int, dependencies: List[MacroTask]) -> str:
        outputs = {task.tag: await queue.result(task.key) for task in dependencies}
        data = body_parse(placeholders_substitute(body, outputs), line)
        data = macro.validate(context, data)
        return await macro.handle(context, data)

    return directive_handle


def placeholders_substitute(text: str, outputs: Dict[str, str]) -> str:
    """
    Replace placeholder tags with their results in a single pass

    Results are never rescanned, so a result that happens to contain a
    placeholder tag (interactive macros emit their own) is left as is.

    Args:
        text: Output of the directive pass
        outputs: Placeholder tag -> replacement text
    """
    if not outputs:
        return text
    pattern = re.compile("|".join(re.escape(tag) for tag in outputs))
    return pattern.sub(lambda match: outputs[match.group(0)], text)


async def macros_expand(
    source: str,
    context: GenerationContext,
    registry: Optional[MacroRegistry] = None,
) -> ExtractedSource:
    """
    Evaluate every directive in source but leave raw block sentinels in place

    include uses this directly so it can shift headings before the included
    card's raw blocks come back.

    Args:
        source: Document text
        context: Generation context for this document
        registry: Macro set to use; the shared default registry when omitted

    Returns:
        ExtractedSource whose text is fully evaluated and still holds the
        raw block sentinels listed in rawBlocks

    Raises:
        RawBlockError: malformed raw markers, in every mode
        MacroError: any macro failure, in validate mode only
    """
    registry = registry or macro_registry
    cardKey = context.cardKey or None

    try:
        extracted = RawBlockExtractor().extract(source)
    except RawBlockError as error:
        raise error.locate(card_key=cardKey)

    queue = TaskQueue()
    runtime = DirectiveRuntime()

    def directive_error(error: MacroError, name: str) -> str:
        error.locate(card_key=cardKey)
        if context.validating:
            raise error
        LOG(f"{name} macro rejected: {error.describe()}", level=2)
        return error_render(error)

    def body_render(body: str, line: int) -> str:
        return runtime.render(
            body,
            on_error=directive_error,
            line_of=lambda position: line + body.count("\n", 0, position),
        )

    for name in registry.names():
        runtime.handler_register(name, directive_bind(registry.get(name), context, queue, body_render))

    text = runtime.render(extracted.stripped, on_error=directive_error, line_of=extracted.line_original)

    def task_error(task: MacroTask, error: Exception) -> str:
        if isinstance(error, MacroError):
            error.locate(line=task.line, card_key=cardKey)
            if error.macro_name is None:
                error.macro_name = task.macroName
            if context.validating:
                raise error
            LOG(f"{task.macroName} macro failed: {error.describe()}", level=2)
        else:
            if context.validating:
                raise error
            LOG_exception(f"Unexpected failure in {task.macroName} macro ({task.key})", error)
        return error_render(error)

    results = await queue.drain(task_error)
    text = placeholders_substitute(text, {task.tag: results[task.key] for task in queue})
    return ExtractedSource(stripped=text, rawBlocks=extracted.rawBlocks)


async def macros_evaluate(
    source: str,
    context: GenerationContext,
    registry: Optional[MacroRegistry] = None,
) -> str:
    """
    Expand every macro in source for the context's mode

    Args:
        source: Card content or any AsciiDoc text
        context: Mode, card key and stores for this evaluation
        registry: Macro set to use; the shared default registry when omitted

    Returns:
        Fully evaluated text with raw blocks restored byte for byte

    Raises:
        RawBlockError: malformed raw markers, in every mode
        MacroError: any macro failure, in validate mode only
    """
    state_connectToLogger(context)
    LOG(f"Evaluating macros for {context.cardKey or '<document>'} in {context.mode.value} mode", level=2)
    expanded = await macros_expand(source, context, registry)
    return RawBlockExtractor().restore(expanded.stripped, expanded.rawBlocks)


async def cards_validate(
    project: Any,
    cardKeys: Optional[Iterable[str]] = None,
    registry: Optional[MacroRegistry] = None,
) -> Dict[str, str]:
    """
    Validate the macros of several cards

    Args:
        project: Document store; must also provide keys() when cardKeys is omitted
        cardKeys: Cards to check; every card of the project when omitted
        registry: Macro set to use

    Returns:
        Card key -> error message, for failing cards only

    Example:
        >>> await cards_validate(project, ["c1", "c2"])
        {'c2': 'Card key ghost not found at line 3'}
    """
    keys = list(cardKeys) if cardKeys is not None else list(project.keys())
    errors: Dict[str, str] = {}

    for key in keys:
        try:
            card = await project.card_find(key)
            context = GenerationContext(mode=Mode.VALIDATE, cardKey=key, project=project)
            await macros_evaluate(card.content, context, registry)
        except NotFoundError as error:
            errors[key] = str(error)
        except MacroError as error:
            errors[key] = error.describe()

    LOG(f"Validated {len(keys)} card(s), {len(errors)} with errors", level=1)
    return errors
