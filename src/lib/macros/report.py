"""
report macro: a named project report

The live client renders reports itself from a <report-macro> element.
Exports get a note pointing readers at the interactive view.
"""

from typing import Any, Dict

from ...models.context import GenerationContext
from ...models.macros import MacroMetadata
from ..serialize import admonition_create, htmlPlaceholder_create, passthrough_create
from .base import BaseMacro


class ReportMacro(BaseMacro):
    metadata = MacroMetadata(name="report", tagName="report-macro", schemaId="reportMacroSchema")

    async def handle_static(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        return admonition_create(
            "NOTE",
            "Report",
            f"Report '{data['name']}' is only available in the interactive view.",
        )

    async def handle_inject(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        return passthrough_create(htmlPlaceholder_create(self.metadata, data, context.counter))

    async def handle_staticSite(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        return await self.handle_static(context, data)
