"""
Agent Service Module - The central orchestrator for banking chat turns.

This module:
1. Records each user message in the conversation store
2. Runs the tool-dispatch loop between the language model and the banking tools
3. Records the model's final answer and returns it to the caller
"""

import json
import logging
import os
import uuid
from typing import Any, Dict, List, Optional

from banking_server.config import load_tool_settings
from banking_server.server import BankingToolServer
from banking_server.tools.llm import LLMTool
from banking_server.types.models import FinalText, ModelError, ToolCall

from .conversations import ConversationStore, utc_timestamp

logger = logging.getLogger(__name__)

DEFAULT_INSTRUCTIONS = "You are a banking assistant."
FALLBACK_REPLY = "I apologize, but I could not process your request."


class AgentError(Exception):
    """A chat turn could not be completed."""


class ToolRoundsExceeded(AgentError):
    """The model kept requesting tools past the configured limit."""

    def __init__(self, rounds):
        super().__init__(f"Model requested more than {rounds} tool calls without answering")
        self.rounds = rounds


class AgentService:
    """
    Runs chat turns for banking customers.

    The tool server, the language model and the conversation store are all
    injected; defaults are built from configuration when omitted.
    """

    def __init__(
        self,
        tool_server: Optional[BankingToolServer] = None,
        llm_tool: Optional[Any] = None,
        conversations: Optional[ConversationStore] = None,
        instructions: Optional[str] = None,
        max_tool_rounds: Optional[int] = None,
    ):
        settings = self._load_settings()
        self.tool_server = tool_server or BankingToolServer()
        if not self.tool_server.is_running:
            self.tool_server.start()
        self.llm_tool = llm_tool or LLMTool()
        self.conversations = conversations if conversations is not None else ConversationStore()
        self.instructions = instructions or settings["instructions"]
        self.max_tool_rounds = int(max_tool_rounds if max_tool_rounds is not None else settings["max_tool_rounds"])

        if not getattr(self.llm_tool, "is_configured", True):
            logger.warning("LLM Tool not properly configured. Chat requests will fail.")

        logger.info(
            f"Agent Service initialized with {len(self.tool_server.get_registered_tools())} tools, "
            f"max {self.max_tool_rounds} tool rounds per turn"
        )

    def _load_settings(self):
        file_settings = load_tool_settings("AgentService")
        return {
            "instructions": os.environ.get("AGENT_INSTRUCTIONS")
            or file_settings.get("instructions")
            or DEFAULT_INSTRUCTIONS,
            "max_tool_rounds": os.environ.get("AGENT_MAX_TOOL_ROUNDS") or file_settings.get("max_tool_rounds", 10),
        }

    def chat(self, thread_id: Optional[str], customer_id: str, message: str) -> Dict[str, Any]:
        """
        Handle one user message end to end.

        The user message is stored before the model runs, so it stays in
        the history even if the turn fails.

        Args:
            thread_id: Existing conversation id, or None to start a new one
            customer_id: Customer sending the message
            message: The user's text

        Returns:
            Dict with threadId, customerId, message and timestamp

        Raises:
            AgentError / ModelError: If the turn could not be completed
        """
        thread_id, session = self.conversations.create_or_append(thread_id, customer_id, message)
        reply = self.respond(session.customer_id, session.history())
        stored = self.conversations.append_assistant(thread_id, reply)

        return {
            "threadId": thread_id,
            "customerId": session.customer_id,
            "message": reply,
            "timestamp": stored.timestamp if stored else utc_timestamp(),
        }

    def respond(self, customer_id: str, history: List[Dict[str, Any]]) -> str:
        """
        Run the dispatch loop for one turn and return the assistant's text.

        Args:
            customer_id: Customer the conversation belongs to
            history: The conversation's user/assistant messages, oldest first

        Returns:
            str: The model's final answer
        """
        working = [{"role": "system", "content": self._system_prompt(customer_id)}]
        working.extend({"role": m["role"], "content": m["content"]} for m in history)
        tool_specs = self.tool_server.tool_specs()

        rounds = 0
        while True:
            turn = self.llm_tool.generate(working, tool_specs)

            if isinstance(turn, FinalText):
                logger.info(f"Turn for {customer_id} completed after {rounds} tool call(s)")
                return turn.text or FALLBACK_REPLY

            if not isinstance(turn, ToolCall):
                raise ModelError(f"Unexpected model turn: {turn!r}")

            if rounds >= self.max_tool_rounds:
                logger.error(f"Tool round limit ({self.max_tool_rounds}) reached for customer {customer_id}")
                raise ToolRoundsExceeded(self.max_tool_rounds)
            rounds += 1

            call_id = turn.id or f"call_{uuid.uuid4().hex[:12]}"
            logger.info(f"Model requested tool {turn.name} (round {rounds})")
            result = self.tool_server.execute_tool(turn.name, turn.arguments)

            working.append(
                {
                    "role": "assistant",
                    "content": None,
                    "tool_call": {"id": call_id, "name": turn.name, "arguments": turn.arguments},
                }
            )
            working.append(
                {
                    "role": "tool",
                    "tool_call_id": call_id,
                    "name": turn.name,
                    "content": json.dumps(result),
                }
            )

    def _system_prompt(self, customer_id):
        return (
            f"{self.instructions}\n\n"
            f"The customer you are helping has customer ID {customer_id}. "
            "Use this ID for every tool that asks for a customerId."
        )

    def get_tools_info(self) -> List[Dict[str, Any]]:
        """Name, description, version and input schema of every tool."""
        return [spec.to_dict() for spec in self.tool_server.tool_specs()]

    def get_health_status(self) -> Dict[str, Any]:
        """
        Get the health status of the agent service and its dependencies.

        Returns:
            Dict[str, Any]: Health status information
        """
        return {
            "status": "ok",
            "timestamp": utc_timestamp(),
            "activeConversations": len(self.conversations),
            "llm_tool": "healthy" if getattr(self.llm_tool, "is_configured", True) else "unavailable",
            "tools": self.tool_server.get_registered_tools(),
        }
