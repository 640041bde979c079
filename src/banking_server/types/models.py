from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union


class BankingError(Exception):
    """Base class for hard failures raised by the ledger and the tools."""

    kind = "ToolError"


class CustomerNotFound(BankingError):
    kind = "CustomerNotFound"

    def __init__(self, customer_id):
        super().__init__(f"Customer {customer_id} not found")
        self.customer_id = customer_id


class AccountNotFound(BankingError):
    kind = "AccountNotFound"

    def __init__(self, account_id, customer_id=None):
        if customer_id:
            message = f"Account {account_id} not found for customer {customer_id}"
        else:
            message = f"Account {account_id} not found"
        super().__init__(message)
        self.account_id = account_id
        self.customer_id = customer_id


class ModelError(Exception):
    """The language model could not produce a turn (unconfigured, HTTP error, bad response)."""


class Tool:
    def __init__(self, name, description, version, parameters=None):
        self.name = name
        self.description = description
        self.version = version
        # JSON schema of the tool's input
        self.parameters = parameters or {"type": "object", "properties": {}}

    def to_dict(self):
        return {
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "parameters": self.parameters,
        }

    def __repr__(self):
        return f"Tool(name={self.name}, description={self.description}, version={self.version})"


@dataclass
class ToolCall:
    """A request from the model to run one declared tool."""

    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)
    id: Optional[str] = None


@dataclass
class FinalText:
    """A plain-text answer that ends the model's turn."""

    text: str


TurnResult = Union[ToolCall, FinalText]


def tool_error(kind: str, message: str) -> Dict[str, str]:
    """Build the structured result reported to the model when a tool fails."""
    return {"error": kind, "message": message}
