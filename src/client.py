#!/usr/bin/env python
"""
Banking Agent Client - A client for the banking agent's REST API

This module shows how a front end talks to the agent: it sends chat
messages, keeps the thread id between them, and reads or deletes the
conversation history.
"""

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class BankingAgentClientError(Exception):
    """The API answered with an error status or could not be reached."""


class BankingAgentClient:
    """
    Client for the Agent Service HTTP API.

    The thread id returned by the first chat is reused for later chats so
    the agent sees one continuous conversation.
    """

    def __init__(self, base_url: str = "http://localhost:3000", timeout: float = 120):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.thread_id: Optional[str] = None

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = requests.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request error: {str(e)}")
            raise BankingAgentClientError(f"Request error: {str(e)}") from e

        if not response.ok:
            try:
                body = response.json()
                detail = body.get("message") or body.get("error")
            except ValueError:
                detail = response.text[:200]
            raise BankingAgentClientError(f"API error {response.status_code}: {detail}")

        return response.json()

    def chat(self, customer_id: str, message: str) -> Dict[str, Any]:
        """
        Send a message to the banking agent.

        Args:
            customer_id: Customer the message is sent as
            message: The message text

        Returns:
            The API response with threadId, customerId, message and timestamp
        """
        payload = {"customerId": customer_id, "message": message}
        if self.thread_id:
            payload["threadId"] = self.thread_id

        data = self._request("POST", "/api/chat", json=payload)
        self.thread_id = data.get("threadId")
        return data

    def get_conversation(self, thread_id: Optional[str] = None) -> Dict[str, Any]:
        thread_id = thread_id or self.thread_id
        if not thread_id:
            raise BankingAgentClientError("No thread ID available")
        return self._request("GET", f"/api/conversation/{thread_id}")

    def delete_conversation(self, thread_id: Optional[str] = None) -> Dict[str, Any]:
        thread_id = thread_id or self.thread_id
        if not thread_id:
            raise BankingAgentClientError("No thread ID available")
        data = self._request("DELETE", f"/api/conversation/{thread_id}")
        if thread_id == self.thread_id:
            self.thread_id = None
        return data

    def new_conversation(self):
        """Forget the current thread so the next chat starts a new one."""
        self.thread_id = None

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health")
