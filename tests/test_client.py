import unittest
from unittest import mock

import requests

from client import BankingAgentClient, BankingAgentClientError
from client_runner import run_console


def api_response(body, status_code=200):
    response = mock.Mock()
    response.ok = status_code < 400
    response.status_code = status_code
    response.json.return_value = body
    return response


class TestBankingAgentClient(unittest.TestCase):

    def setUp(self):
        self.client = BankingAgentClient("http://agent.test/")

    @mock.patch("client.requests.request")
    def test_chat_reuses_thread_id(self, mock_request):
        mock_request.return_value = api_response(
            {"threadId": "thread_1", "customerId": "cust_123", "message": "Hi", "timestamp": "t"}
        )

        self.client.chat("cust_123", "Hello")
        self.client.chat("cust_123", "Again")

        first, second = mock_request.call_args_list
        self.assertEqual(first[0], ("POST", "http://agent.test/api/chat"))
        self.assertNotIn("threadId", first[1]["json"])
        self.assertEqual(second[1]["json"]["threadId"], "thread_1")

    @mock.patch("client.requests.request")
    def test_error_status_raises(self, mock_request):
        mock_request.return_value = api_response({"error": "Conversation not found"}, status_code=404)

        with self.assertRaisesRegex(BankingAgentClientError, "Conversation not found"):
            self.client.get_conversation("thread_missing")

    @mock.patch("client.requests.request")
    def test_connection_error_raises(self, mock_request):
        mock_request.side_effect = requests.ConnectionError("refused")

        with self.assertRaises(BankingAgentClientError):
            self.client.health()

    def test_history_needs_a_thread(self):
        with self.assertRaises(BankingAgentClientError):
            self.client.get_conversation()

    @mock.patch("client.requests.request")
    def test_delete_forgets_current_thread(self, mock_request):
        self.client.thread_id = "thread_1"
        mock_request.return_value = api_response({"message": "Conversation deleted successfully", "threadId": "thread_1"})

        self.client.delete_conversation()

        self.assertIsNone(self.client.thread_id)
        self.assertEqual(mock_request.call_args[0], ("DELETE", "http://agent.test/api/conversation/thread_1"))


class TestConsole(unittest.TestCase):

    def test_console_session(self):
        client = mock.Mock()
        client.chat.return_value = {"message": "You have two accounts."}
        inputs = iter(["What accounts do I have?", "", "exit"])
        output = []

        run_console(client, "cust_123", input_fn=lambda prompt: next(inputs), output_fn=output.append)

        client.chat.assert_called_once_with("cust_123", "What accounts do I have?")
        self.assertIn("\nAgent: You have two accounts.", output)
        self.assertEqual(output[-1], "Goodbye!")


if __name__ == '__main__':
    unittest.main()
