#!/usr/bin/env python
"""
Banking Agent Client Runner - An interactive console for the banking agent

This script chats with a running Agent Service through BankingAgentClient.
"""

import argparse
import logging

from client import BankingAgentClient, BankingAgentClientError

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Ask about your accounts, for example:\n"
    "- 'What accounts do I have?'\n"
    "- 'Transfer 500 from checking to savings'\n"
    "Commands: 'history', 'new', 'help', 'exit'"
)


def run_console(client, customer_id, input_fn=input, output_fn=print):
    """Read user input until 'exit', printing the agent's replies."""
    output_fn("Welcome to the Banking Agent!")
    output_fn(HELP_TEXT)

    while True:
        try:
            user_input = input_fn("\nYou: ").strip()
        except EOFError:
            break

        if not user_input:
            continue
        command = user_input.lower()
        if command in ("exit", "quit", "bye"):
            break
        if command in ("help", "commands"):
            output_fn(HELP_TEXT)
            continue
        if command == "new":
            client.new_conversation()
            output_fn("Started a new conversation.")
            continue

        try:
            if command == "history":
                conversation = client.get_conversation()
                for message in conversation.get("messages", []):
                    output_fn(f"[{message['timestamp']}] {message['role']}: {message['content']}")
                continue

            response = client.chat(customer_id, user_input)
            output_fn(f"\nAgent: {response['message']}")
        except BankingAgentClientError as e:
            output_fn(f"Error: {str(e)}")

    output_fn("Goodbye!")


def main(argv=None):
    """Launch the banking agent console"""
    parser = argparse.ArgumentParser(description="Chat with the Banking Agent")
    parser.add_argument("--url", default="http://localhost:3000", help="Agent Service base URL")
    parser.add_argument("--customer", default="cust_123", help="Customer ID to chat as")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    print("=" * 60)
    print("BANKING AGENT CLIENT".center(60))
    print("=" * 60)

    client = BankingAgentClient(args.url)
    try:
        run_console(client, args.customer)
    except KeyboardInterrupt:
        print("\nChat terminated by user.")


if __name__ == "__main__":
    main()
