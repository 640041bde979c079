import json
import logging
import os
import uuid

import requests

from ..config import env_flag, load_tool_settings
from ..types.models import FinalText, ModelError, ToolCall

logger = logging.getLogger(__name__)


class LLMTool:
    """Tool-calling chat model reached over the provider's HTTP API.

    ``generate`` takes the working message history and the declared tool
    specs and returns either a ToolCall or a FinalText. History entries use
    one neutral shape that is converted per provider:

    - ``{"role": "system" | "user" | "assistant", "content": str}``
    - ``{"role": "assistant", "content": None, "tool_call": {"id", "name", "arguments"}}``
    - ``{"role": "tool", "tool_call_id": str, "name": str, "content": str}``
    """

    def __init__(self, settings=None):
        self.name = "LLMTool"
        self.description = "Generate agent turns with a tool-calling LLM API"
        self.version = "1.0.0"
        # Load API settings from configuration
        self.settings = settings or self._load_settings()
        self.provider = self.settings.get("provider", "openai")
        self.api_key = self._clean_api_key(self.settings.get("api_key"))
        self.model = self.settings.get("model", "gpt-4o-mini")
        self.temperature = float(self.settings.get("temperature", 0.2))
        self.timeout = float(self.settings.get("timeout", 60))
        self.enabled = self.settings.get("enabled", True)

        if not self.enabled:
            logger.info("LLM Tool is disabled in configuration")
        elif not self.api_key:
            logger.warning("No API key configured for LLM Tool")
        else:
            logger.info(
                f"LLM Tool initialized with provider: {self.provider}, model: {self.model}"
            )
            masked_key = (
                f"{self.api_key[:5]}...{self.api_key[-4:]}"
                if len(self.api_key) > 10
                else "***"
            )
            logger.debug(f"API key format: {masked_key}, length: {len(self.api_key)}")

        # API endpoints for different providers
        self.endpoints = {
            "openai": "https://api.openai.com/v1/chat/completions",
            "azure": self.settings.get("azure_endpoint"),
            "anthropic": "https://api.anthropic.com/v1/messages",
        }

    def _clean_api_key(self, api_key):
        """Clean API key by removing quotes, whitespace, etc."""
        if not api_key:
            return None

        return api_key.strip().strip("\"'")

    def _load_settings(self):
        """Load LLM settings from environment variables or config file"""
        file_settings = load_tool_settings(self.name)
        return {
            "provider": os.environ.get("LLM_PROVIDER") or file_settings.get("provider", "openai"),
            "api_key": os.environ.get("LLM_API_KEY")
            or os.environ.get("OPENAI_API_KEY")
            or file_settings.get("api_key"),
            "model": os.environ.get("LLM_MODEL") or file_settings.get("model", "gpt-4o-mini"),
            "azure_endpoint": os.environ.get("AZURE_OPENAI_ENDPOINT") or file_settings.get("azure_endpoint"),
            "temperature": file_settings.get("temperature", 0.2),
            "timeout": os.environ.get("LLM_TIMEOUT") or file_settings.get("timeout", 60),
            "enabled": env_flag("LLM_ENABLED", file_settings.get("enabled", True)),
        }

    @property
    def is_configured(self):
        return bool(self.enabled and self.api_key)

    def generate(self, history, tool_specs):
        """
        Ask the model for its next move in the conversation.

        Args:
            history (list): Working message history, oldest first
            tool_specs (list): Tool models the model may call

        Returns:
            ToolCall | FinalText: The requested tool call or the final answer

        Raises:
            ModelError: If the model is unavailable or its reply cannot be used
        """
        if not self.enabled:
            raise ModelError("LLM Tool is disabled in configuration")
        if not self.api_key:
            raise ModelError(
                "LLM API key not configured. Please set LLM_API_KEY environment variable or update the config."
            )

        try:
            if self.provider == "openai":
                return self._call_openai_api(history, tool_specs)
            elif self.provider == "azure":
                return self._call_azure_api(history, tool_specs)
            elif self.provider == "anthropic":
                return self._call_anthropic_api(history, tool_specs)
            else:
                raise ModelError(f"Unsupported LLM provider: {self.provider}")
        except requests.exceptions.RequestException as e:
            error_details = str(e)
            if getattr(e, "response", None) is not None:
                error_details = f"{error_details} - Status code: {e.response.status_code}, Content: {e.response.text[:200]}"
            logger.error(f"LLM API request failed: {error_details}")
            raise ModelError(f"LLM API request failed: {error_details}") from e

    # OpenAI / Azure OpenAI

    def _openai_messages(self, history):
        messages = []
        for entry in history:
            role = entry["role"]
            if role == "tool":
                messages.append(
                    {
                        "role": "tool",
                        "tool_call_id": entry["tool_call_id"],
                        "content": entry["content"],
                    }
                )
            elif entry.get("tool_call"):
                call = entry["tool_call"]
                messages.append(
                    {
                        "role": "assistant",
                        "content": None,
                        "tool_calls": [
                            {
                                "id": call["id"],
                                "type": "function",
                                "function": {
                                    "name": call["name"],
                                    "arguments": json.dumps(call["arguments"]),
                                },
                            }
                        ],
                    }
                )
            else:
                messages.append({"role": role, "content": entry["content"]})
        return messages

    def _openai_tools(self, tool_specs):
        return [
            {
                "type": "function",
                "function": {
                    "name": spec.name,
                    "description": spec.description,
                    "parameters": spec.parameters,
                },
            }
            for spec in tool_specs
        ]

    def _parse_openai_response(self, result):
        try:
            message = result["choices"][0]["message"]
            tool_calls = message.get("tool_calls") or []
            if tool_calls:
                if len(tool_calls) > 1:
                    logger.warning(f"Model requested {len(tool_calls)} tool calls; acting on the first")
                call = tool_calls[0]
                return ToolCall(
                    name=call["function"]["name"],
                    arguments=json.loads(call["function"].get("arguments") or "{}"),
                    id=call.get("id") or f"call_{uuid.uuid4().hex[:12]}",
                )
            return FinalText(message.get("content") or "")
        except (KeyError, IndexError, TypeError, json.JSONDecodeError) as e:
            logger.error(f"Error parsing LLM response: {str(e)}")
            raise ModelError(f"Error parsing LLM response: {str(e)}") from e

    def _call_openai_api(self, history, tool_specs):
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        data = {
            "model": self.model,
            "messages": self._openai_messages(history),
            "temperature": self.temperature,
        }
        if tool_specs:
            data["tools"] = self._openai_tools(tool_specs)
            data["tool_choice"] = "auto"
            data["parallel_tool_calls"] = False

        logger.debug(f"Making OpenAI API request to {self.endpoints['openai']} with model {self.model}")

        response = requests.post(
            self.endpoints["openai"],
            headers=headers,
            json=data,
            timeout=self.timeout,
        )

        if response.status_code != 200:
            try:
                error_json = response.json()
                error_message = error_json.get("error", {}).get("message", "Unknown error")
            except ValueError:
                error_message = response.text[:200]
            logger.error(f"OpenAI API error ({response.status_code}): {error_message}")
            raise ModelError(f"OpenAI API error ({response.status_code}): {error_message}")

        return self._parse_openai_response(response.json())

    def _call_azure_api(self, history, tool_specs):
        if not self.endpoints["azure"]:
            raise ModelError("Azure OpenAI endpoint not configured")

        headers = {"Content-Type": "application/json", "api-key": self.api_key}

        data = {
            "messages": self._openai_messages(history),
            "temperature": self.temperature,
        }
        if tool_specs:
            data["tools"] = self._openai_tools(tool_specs)
            data["tool_choice"] = "auto"
            data["parallel_tool_calls"] = False

        # Azure endpoint needs to include the deployment name and api-version
        endpoint = self.endpoints["azure"]
        if "completions" not in endpoint:
            endpoint = f"{endpoint.rstrip('/')}/openai/deployments/{self.model}/chat/completions?api-version=2024-06-01"

        response = requests.post(endpoint, headers=headers, json=data, timeout=self.timeout)
        response.raise_for_status()

        return self._parse_openai_response(response.json())

    # Anthropic

    def _anthropic_payload(self, history, tool_specs):
        system_parts = []
        messages = []
        for entry in history:
            role = entry["role"]
            if role == "system":
                system_parts.append(entry["content"])
            elif role == "tool":
                messages.append(
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "tool_result",
                                "tool_use_id": entry["tool_call_id"],
                                "content": entry["content"],
                            }
                        ],
                    }
                )
            elif entry.get("tool_call"):
                call = entry["tool_call"]
                messages.append(
                    {
                        "role": "assistant",
                        "content": [
                            {
                                "type": "tool_use",
                                "id": call["id"],
                                "name": call["name"],
                                "input": call["arguments"],
                            }
                        ],
                    }
                )
            else:
                messages.append({"role": role, "content": entry["content"]})

        data = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": 1024,
        }
        if system_parts:
            data["system"] = "\n\n".join(system_parts)
        if tool_specs:
            data["tools"] = [
                {
                    "name": spec.name,
                    "description": spec.description,
                    "input_schema": spec.parameters,
                }
                for spec in tool_specs
            ]
            data["tool_choice"] = {"type": "auto", "disable_parallel_tool_use": True}
        return data

    def _call_anthropic_api(self, history, tool_specs):
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": "2023-06-01",
        }

        response = requests.post(
            self.endpoints["anthropic"],
            headers=headers,
            json=self._anthropic_payload(history, tool_specs),
            timeout=self.timeout,
        )
        response.raise_for_status()
        result = response.json()

        try:
            blocks = result["content"]
            for block in blocks:
                if block.get("type") == "tool_use":
                    return ToolCall(name=block["name"], arguments=block.get("input") or {}, id=block["id"])
            text = "".join(block.get("text", "") for block in blocks if block.get("type") == "text")
            return FinalText(text)
        except (KeyError, TypeError) as e:
            logger.error(f"Error parsing Anthropic response: {str(e)}")
            raise ModelError(f"Error parsing LLM response: {str(e)}") from e
