"""
Agent Service Package - Provides the banking chat agent and its HTTP API.

This package receives chat messages, keeps conversation threads and runs
the dispatch loop between the language model and the banking tools.
"""

from .agent_service import AgentError, AgentService, ToolRoundsExceeded
from .conversations import ConversationStore

__all__ = ["AgentError", "AgentService", "ConversationStore", "ToolRoundsExceeded"]
