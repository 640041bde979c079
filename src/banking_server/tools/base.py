"""
Base class for the banking tools.

Every tool declares a pydantic model for its input. The model validates the
arguments the LLM sends and its JSON schema is what the LLM is shown.
"""

from decimal import Decimal
from typing import Any, Dict, Type

from pydantic import BaseModel, ConfigDict

from ..types.models import Tool


class ToolInput(BaseModel):
    """Common config for tool inputs: camelCase on the wire, no unknown fields."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class BankingTool:
    name: str = ""
    description: str = ""
    version: str = "1.0.0"
    input_model: Type[ToolInput] = ToolInput

    def parse_arguments(self, arguments: Dict[str, Any]) -> ToolInput:
        """Validate raw arguments; raises pydantic.ValidationError."""
        return self.input_model.model_validate(arguments or {})

    def execute(self, **params) -> Dict[str, Any]:
        raise NotImplementedError

    def run(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """Validate the arguments and execute the tool with snake_case params."""
        parsed = self.parse_arguments(arguments)
        return self.execute(**parsed.model_dump())

    def as_tool_model(self):
        """Convert to Tool model for registration"""
        return Tool(
            name=self.name,
            description=self.description,
            version=self.version,
            parameters=self.input_model.model_json_schema(by_alias=True),
        )


def as_number(value: Decimal) -> float:
    """Render a ledger Decimal as a JSON number."""
    return float(value)
