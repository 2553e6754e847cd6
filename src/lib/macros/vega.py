"""
vega and vegaLite macros: charts drawn from a Vega or Vega-Lite spec

Charts are drawn by the live client from a <vega-macro> element, which
accepts both grammars (a Vega-Lite spec is recognised by its "$schema").
vegaLite therefore hands its validated spec to vega unchanged. Static
exports get a note in place of the chart; there is no chart renderer on
this side.
"""

from typing import Any, Dict, Optional

from ...models.context import GenerationContext
from ...models.macros import MacroMetadata
from ..serialize import admonition_create, htmlPlaceholder_create, passthrough_create
from .base import BaseMacro


class VegaMacro(BaseMacro):
    metadata = MacroMetadata(name="vega", tagName="vega-macro", schemaId="vegaMacroSchema")

    async def handle_static(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        title = data["spec"].get("description") or data["spec"].get("title")
        label = f"Chart '{title}'" if isinstance(title, str) and title else "This chart"
        return admonition_create("NOTE", "Chart", f"{label} is only available in the interactive view.")

    async def handle_inject(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        return passthrough_create(htmlPlaceholder_create(self.metadata, data, context.counter))


class VegaLiteMacro(BaseMacro):
    """Vega-Lite charts, rendered through the vega macro"""
    metadata = MacroMetadata(name="vegaLite", tagName="vega-macro", schemaId="vegaLiteMacroSchema")

    def __init__(self, vega: Optional[VegaMacro] = None) -> None:
        self.vega = vega or VegaMacro()

    async def handle_static(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        return await self.vega.handle_static(context, {"spec": data["spec"]})

    async def handle_inject(self, context: GenerationContext, data: Dict[str, Any]) -> str:
        return await self.vega.handle_inject(context, {"spec": data["spec"]})
