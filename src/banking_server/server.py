import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .flags import FeatureFlagOracle
from .ledger import Ledger
from .tools.accounts import GetAccountBalanceTool, ListAccountsTool, ListTransactionsTool, TransferFundsTool
from .tools.dispute import TransactionDisputeTool
from .tools.registry import ToolRegistry
from .tools.research import DeepResearchTool
from .tools.support import CommonSupportTool
from .types.models import BankingError, Tool, tool_error

logger = logging.getLogger(__name__)


class BankingToolServer:
    """Owns the banking tools and runs them on behalf of the agent.

    The ledger and the flag oracle are injected so that every server (and
    every test) works on its own state.
    """

    def __init__(self, ledger: Optional[Ledger] = None, flags: Optional[FeatureFlagOracle] = None):
        self.ledger = ledger if ledger is not None else Ledger.with_seed_data()
        self.flags = flags if flags is not None else FeatureFlagOracle()
        self.tools_registry = ToolRegistry()
        self.is_running = False
        self._initialized = False

    def start(self):
        logger.info("Starting banking tool server...")
        if not self._initialized:
            self._initialize_built_in_tools()
            self._initialized = True
        self.is_running = True

    def stop(self):
        logger.info("Stopping banking tool server...")
        self.is_running = False

    def register_tool(self, tool_instance):
        """Register a tool instance under its own name"""
        self.tools_registry.register_tool(tool_instance.name, tool_instance)

    def get_registered_tools(self) -> List[str]:
        return self.tools_registry.get_registered_tools()

    def get_tool_instance(self, tool_name):
        """Get the actual tool instance with functionality"""
        return self.tools_registry.get_tool(tool_name)

    def tool_specs(self) -> List[Tool]:
        """Declared name, description and input schema of every registered tool."""
        return [
            self.tools_registry.get_tool(name).as_tool_model()
            for name in self.get_registered_tools()
        ]

    def execute_tool(self, tool_name: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Execute a tool with the given parameters.

        Hard failures are turned into a tool-error result rather than raised,
        so the caller can hand them back to the model.

        Args:
            tool_name: Name of the tool to execute
            params: Arguments for the tool, as sent by the model

        Returns:
            Dict with the tool output, or {"error": kind, "message": text}
        """
        if not self.is_running:
            logger.warning(f"Tool {tool_name} requested while the server is stopped")
            return tool_error("ToolError", "Banking tool server is not running")

        tool_instance = self.get_tool_instance(tool_name)

        if not tool_instance:
            logger.warning(f"Model requested unknown tool '{tool_name}'")
            return tool_error("ToolNotFound", f"Tool '{tool_name}' not found")

        try:
            result = tool_instance.run(params)
            logger.info(f"Executed tool {tool_instance.name}")
            return result
        except ValidationError as e:
            logger.warning(f"Invalid arguments for tool {tool_instance.name}: {e.errors()}")
            return tool_error("ValidationError", f"Invalid arguments for {tool_instance.name}: {str(e)}")
        except BankingError as e:
            logger.info(f"Tool {tool_instance.name} failed: {str(e)}")
            return tool_error(e.kind, str(e))
        except ValueError as e:
            logger.info(f"Tool {tool_instance.name} rejected its input: {str(e)}")
            return tool_error("ValidationError", str(e))
        except Exception as e:
            logger.exception(f"Error executing tool {tool_instance.name}: {str(e)}")
            return tool_error("ToolError", f"Error executing tool: {str(e)}")

    def _initialize_built_in_tools(self):
        """Initialize and register built-in tools"""
        for tool in (
            ListAccountsTool(self.ledger),
            GetAccountBalanceTool(self.ledger),
            ListTransactionsTool(self.ledger),
            TransferFundsTool(self.ledger),
            DeepResearchTool(self.ledger),
            TransactionDisputeTool(self.flags),
            CommonSupportTool(),
        ):
            self.register_tool(tool)
            logger.info(f"Registered built-in tool: {tool.name}")
