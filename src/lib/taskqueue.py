"""
Deferred macro work collected during the directive pass

Every successful directive pushes one MacroTask: its placeholder tag plus a
producer coroutine function computing the tag's replacement. The queue is
drained exactly once, concurrently, after the synchronous pass is over.
A producer may await an earlier task's result through TaskQueue.result();
this is how a directive waits for the directives nested in its body.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Iterator, List, Optional

from .log import LOG

Producer = Callable[[], Awaitable[str]]


@dataclass
class MacroTask:
    """
    One queued macro invocation

    Attributes:
        key: Placeholder key (e.g., "macro-3")
        tag: Placeholder tag emitted in place of the directive
        macroName: Name of the macro that queued the work
        producer: Zero-argument coroutine function returning the final text
        line: Source line of the directive
    """
    key: str
    tag: str
    macroName: str
    producer: Producer
    line: Optional[int] = None


TaskErrorHandler = Callable[[MacroTask, Exception], str]


class TaskQueue:
    """
    Ordered collection of MacroTasks for one evaluation

    Example:
        >>> queue = TaskQueue()
        >>> queue.push(MacroTask("macro-0", "<x key=...>", "xref", producer))
        >>> results = await queue.drain(on_error)
    """

    def __init__(self) -> None:
        self.tasks: List[MacroTask] = []
        self.drained: bool = False
        self.futures: Dict[str, "asyncio.Future[str]"] = {}

    def push(self, task: MacroTask) -> None:
        if self.drained:
            raise RuntimeError("Cannot queue work on a drained task queue")
        self.tasks.append(task)

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[MacroTask]:
        return iter(self.tasks)

    async def result(self, key: str) -> str:
        """
        Await the producer output of the task queued under key

        Only usable from a producer while the queue drains. A failed
        producer's exception is raised to every task waiting on it.
        """
        if key not in self.futures:
            raise KeyError(f"No running task for placeholder {key}")
        return await self.futures[key]

    async def drain(self, on_error: TaskErrorHandler) -> Dict[str, str]:
        """
        Run every producer concurrently and collect their results

        All producers run to completion before any failure is handled. Failures
        are then passed to on_error in queue order; its return value becomes
        that task's result, or it may raise to abort the evaluation.

        Args:
            on_error: Called with (task, exception) for each failed producer

        Returns:
            Placeholder key -> replacement text
        """
        if self.drained:
            raise RuntimeError("Task queue has already been drained")
        self.drained = True

        if not self.tasks:
            return {}

        LOG(f"Draining {len(self.tasks)} macro task(s)", level=2)
        self.futures = {task.key: asyncio.ensure_future(task.producer()) for task in self.tasks}
        outcomes = await asyncio.gather(*self.futures.values(), return_exceptions=True)

        results: Dict[str, str] = {}
        for task, outcome in zip(self.tasks, outcomes):
            if isinstance(outcome, Exception):
                results[task.key] = on_error(task, outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results[task.key] = outcome
                LOG(f"Placeholder {task.key} ({task.macroName}) resolved", level=3)
        return results
