"""
Agent Service API - Provides HTTP endpoints for chatting with the banking agent.

This module implements a Flask-based REST API over the Agent Service:
chat turns, conversation history lookup and deletion, health and the
tool catalogue.
"""

import logging
import os

from dotenv import load_dotenv
from flask import Flask, jsonify, request

from banking_server.types.models import ModelError

from .agent_service import AgentError, AgentService

logger = logging.getLogger(__name__)


def create_app(agent_service=None):
    """
    Build the Flask app around an Agent Service.

    Args:
        agent_service (AgentService, optional): Service to use. A default one
            is built from configuration when omitted.

    Returns:
        Flask: The configured application
    """
    app = Flask(__name__)
    agent_service = agent_service or AgentService()
    app.config["AGENT_SERVICE"] = agent_service

    @app.route("/api/chat", methods=["POST"])
    def chat():
        """Process a chat message through the Agent Service."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}

        customer_id = data.get("customerId")
        message = data.get("message")
        if not customer_id or not message:
            return jsonify({"error": "Missing required fields: customerId and message are required"}), 400

        try:
            result = agent_service.chat(data.get("threadId"), customer_id, message)
            return jsonify(result)
        except (AgentError, ModelError) as e:
            logger.error(f"Agent could not complete chat turn: {str(e)}")
            return jsonify({"error": "Internal server error", "message": str(e)}), 500
        except Exception as e:
            logger.exception(f"Error processing chat request: {str(e)}")
            return jsonify({"error": "Internal server error", "message": str(e)}), 500

    @app.route("/api/conversation/<thread_id>", methods=["GET"])
    def get_conversation(thread_id):
        """Return the full message history of one conversation."""
        session = agent_service.conversations.get(thread_id)
        if session is None:
            return jsonify({"error": "Conversation not found"}), 404
        return jsonify(session.to_dict())

    @app.route("/api/conversation/<thread_id>", methods=["DELETE"])
    def delete_conversation(thread_id):
        if not agent_service.conversations.delete(thread_id):
            return jsonify({"error": "Conversation not found"}), 404
        return jsonify({"message": "Conversation deleted successfully", "threadId": thread_id})

    @app.route("/health", methods=["GET"])
    def health():
        """Get health status of the Agent Service and its dependencies."""
        return jsonify(agent_service.get_health_status())

    @app.route("/api/tools", methods=["GET"])
    def list_tools():
        """Get the declared banking tools."""
        return jsonify({"status": "success", "tools": agent_service.get_tools_info()})

    return app


def start_agent_service(host="127.0.0.1", port=3000, debug=False):
    """Start the Agent Service API server."""
    app = create_app()
    logger.info(f"Starting Agent Service API on {host}:{port}")
    app.run(host=host, port=port, debug=debug, threaded=True)


if __name__ == "__main__":
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    port = int(os.environ.get("AGENT_SERVICE_PORT", 3000))
    debug = os.environ.get("AGENT_SERVICE_DEBUG", "false").lower() == "true"

    start_agent_service(port=port, debug=debug)
