"""
Macro option schemas and the schema validator adapter

Each macro kind declares a schema id; the validator maps ids to pydantic
models and checks parsed directive bodies against them. Models run in strict
mode with unknown keys forbidden, so "value": "85" is rejected rather than
coerced, and NaN or infinite numbers are refused. Validation returns the
input data untouched, which keeps the placeholder's encoded options
identical to what the author wrote.

Any object with a validate(schemaId, data) method can stand in for
SchemaValidator through GenerationContext.validator.
"""

from typing import Any, Dict, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from ..models.errors import SchemaError


class MacroOptions(BaseModel):
    """Common configuration for macro option schemas"""
    model_config = ConfigDict(strict=True, extra="forbid", allow_inf_nan=False)


class CreateCardsLink(MacroOptions):
    linkType: str
    direction: Literal["from", "to"]
    cardKey: str
    description: Optional[str] = None


class CreateCardsOptions(MacroOptions):
    buttonLabel: str
    template: str
    cardKey: Optional[str] = None
    link: Optional[CreateCardsLink] = None


class ScoreCardOptions(MacroOptions):
    title: str
    value: float
    unit: Optional[str] = None
    legend: Optional[str] = None


class PercentageOptions(MacroOptions):
    title: str
    value: float
    legend: str
    colour: Optional[Literal["blue", "green", "yellow", "red", "orange", "purple"]] = None


class IncludeOptions(MacroOptions):
    """
    Include macro options.

    levelOffset: positive values push headings deeper, negative ones raise them
    title: include (default) / exclude / only the card title
    pageTitles: normal (default) or discrete headings
    whitespace: keep (default) or trim leading and trailing whitespace
    escape: json or csv escaping of the composed text
    """
    cardKey: str
    levelOffset: Optional[Union[int, str]] = None
    whitespace: Optional[Literal["keep", "trim"]] = None
    title: Optional[Literal["include", "exclude", "only"]] = None
    pageTitles: Optional[Literal["normal", "discrete"]] = None
    escape: Optional[Literal["json", "csv"]] = None


class XrefOptions(MacroOptions):
    cardKey: str


class ImageOptions(MacroOptions):
    fileName: str
    cardKey: Optional[str] = None
    alt: Optional[str] = None
    title: Optional[str] = None


class VegaOptions(MacroOptions):
    """Only the shape of the chart definition is checked; the chart library reads the rest"""
    spec: Dict[str, Any]


class VegaLiteOptions(MacroOptions):
    spec: Dict[str, Any]


class ReportOptions(MacroOptions):
    # Reports take arbitrary extra parameters next to the name
    model_config = ConfigDict(strict=True, extra="allow", allow_inf_nan=False)

    name: str


MACRO_SCHEMAS: Dict[str, Type[BaseModel]] = {
    "createCardsMacroSchema": CreateCardsOptions,
    "scoreCardMacroSchema": ScoreCardOptions,
    "percentageMacroSchema": PercentageOptions,
    "includeMacroSchema": IncludeOptions,
    "xrefMacroSchema": XrefOptions,
    "imageMacroSchema": ImageOptions,
    "reportMacroSchema": ReportOptions,
    "vegaMacroSchema": VegaOptions,
    "vegaLiteMacroSchema": VegaLiteOptions,
}


def _error_describe(error: Dict[str, Any]) -> str:
    """Render one pydantic error as 'field.path: message'"""
    location = ".".join(str(part) for part in error.get("loc", ()))
    if location:
        return f"{location}: {error['msg']}"
    return error["msg"]


class SchemaValidator:
    """
    Validates macro bodies against schemas registered by id

    Example:
        >>> validator = SchemaValidator()
        >>> validator.validate("xrefMacroSchema", {"cardKey": "c1"})
        {'cardKey': 'c1'}
        >>> validator.validate("xrefMacroSchema", {})
        Traceback (most recent call last):
        ...
        SchemaError: cardKey: Field required
    """

    def __init__(self) -> None:
        self.schemas: Dict[str, Type[BaseModel]] = dict(MACRO_SCHEMAS)

    def schema_register(self, schemaId: str, model: Type[BaseModel]) -> None:
        """Register or replace the model behind a schema id"""
        self.schemas[schemaId] = model

    def schema_get(self, schemaId: str) -> Type[BaseModel]:
        model = self.schemas.get(schemaId)
        if model is None:
            raise SchemaError(f"Unknown schema '{schemaId}'")
        return model

    def jsonSchema_get(self, schemaId: str) -> Dict[str, Any]:
        """JSON Schema document for a schema id (for editors and docs)"""
        schema = self.schema_get(schemaId).model_json_schema()
        schema.setdefault("$id", schemaId)
        return schema

    def validate(self, schemaId: str, data: Any) -> Any:
        """
        Check data against the schema registered under schemaId

        Args:
            schemaId: Schema identifier from MacroMetadata
            data: Parsed directive body

        Returns:
            data itself, unchanged

        Raises:
            SchemaError: unknown schema id, or data does not conform; the
                         message names every failing field
        """
        model = self.schema_get(schemaId)
        if not isinstance(data, dict):
            raise SchemaError("Expected a JSON object")
        try:
            model.model_validate(data)
        except ValidationError as error:
            raise SchemaError(", ".join(_error_describe(e) for e in error.errors())) from error
        return data


default_validator = SchemaValidator()
