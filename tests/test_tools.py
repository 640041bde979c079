import unittest
from decimal import Decimal

from banking_server.ledger import Ledger
from banking_server.server import BankingToolServer
from banking_server.tools.base import BankingTool
from fakes import StaticFlags


class BrokenTool(BankingTool):
    name = "broken"
    description = "Always fails"

    def execute(self):
        raise RuntimeError("boom")


class TestBankingTools(unittest.TestCase):

    def setUp(self):
        self.ledger = Ledger.with_seed_data()
        self.flags = StaticFlags(enabled=False)
        self.server = BankingToolServer(self.ledger, self.flags)
        self.server.start()

    def run_tool(self, name, **params):
        return self.server.execute_tool(name, params)

    def test_list_accounts(self):
        result = self.run_tool("list-accounts", customerId="cust_123")
        self.assertEqual(
            result["accounts"],
            [
                {"id": "acc_checking_1", "type": "checking", "balance": 50000.0, "currency": "USD"},
                {"id": "acc_savings_1", "type": "savings", "balance": 120000.0, "currency": "USD"},
            ],
        )

    def test_list_accounts_unknown_customer(self):
        result = self.run_tool("list-accounts", customerId="cust_999")
        self.assertEqual(result["error"], "CustomerNotFound")
        self.assertIn("cust_999", result["message"])

    def test_balance_matches_ledger(self):
        self.ledger.transfer("cust_123", "acc_checking_1", "acc_savings_1", 1234.5)
        for customer in self.ledger.customers():
            for account in customer.accounts:
                result = self.run_tool("get-account-balance", customerId=customer.id, accountId=account.id)
                self.assertEqual(result["balance"], float(account.balance))
                self.assertEqual(result["currency"], account.currency)

    def test_balance_unknown_account(self):
        result = self.run_tool("get-account-balance", customerId="cust_123", accountId="acc_nope")
        self.assertEqual(result["error"], "AccountNotFound")

    def test_list_transactions_limit(self):
        result = self.run_tool("list-transactions", customerId="cust_123", accountId="acc_checking_1", limit=2)
        self.assertEqual([t["id"] for t in result["transactions"]], ["tx_1", "tx_2"])
        self.assertEqual(result["transactions"][0]["amount"], -1500.0)
        self.assertEqual(result["transactions"][0]["merchant"], "Staples")

    def test_list_transactions_never_more_than_exist(self):
        default = self.run_tool("list-transactions", customerId="cust_123", accountId="acc_checking_1")
        large = self.run_tool("list-transactions", customerId="cust_123", accountId="acc_checking_1", limit=50)
        empty = self.run_tool("list-transactions", customerId="cust_123", accountId="acc_savings_1")

        self.assertEqual([t["id"] for t in default["transactions"]], ["tx_1", "tx_2", "tx_3", "tx_4"])
        self.assertEqual(len(large["transactions"]), 4)
        self.assertEqual(empty["transactions"], [])

    def test_list_transactions_rejects_zero_limit(self):
        result = self.run_tool("list-transactions", customerId="cust_123", accountId="acc_checking_1", limit=0)
        self.assertEqual(result["error"], "ValidationError")

    def test_transfer_funds(self):
        result = self.run_tool(
            "transfer-funds",
            customerId="cust_123",
            fromAccountId="acc_checking_1",
            toAccountId="acc_savings_1",
            amount=500,
        )

        self.assertTrue(result["success"])
        self.assertTrue(result["transactionId"])
        self.assertEqual(result["message"], "Successfully transferred 500 from acc_checking_1 to acc_savings_1")
        checking = self.run_tool("get-account-balance", customerId="cust_123", accountId="acc_checking_1")
        savings = self.run_tool("get-account-balance", customerId="cust_123", accountId="acc_savings_1")
        self.assertEqual(checking["balance"], 49500.0)
        self.assertEqual(savings["balance"], 120500.0)

    def test_transfer_funds_keeps_exact_cents(self):
        result = self.run_tool(
            "transfer-funds",
            customerId="cust_123",
            fromAccountId="acc_checking_1",
            toAccountId="acc_savings_1",
            amount="0.10",
        )

        self.assertTrue(result["success"])
        self.assertIn("transferred 0.10 from", result["message"])
        self.assertEqual(self.ledger.find_account("cust_123", "acc_checking_1").balance, Decimal("49999.90"))

    def test_transfer_funds_insufficient(self):
        result = self.run_tool(
            "transfer-funds",
            customerId="cust_123",
            fromAccountId="acc_checking_1",
            toAccountId="acc_savings_1",
            amount=60000,
        )

        self.assertEqual(result, {"success": False, "message": "Insufficient funds.", "transactionId": ""})
        checking = self.run_tool("get-account-balance", customerId="cust_123", accountId="acc_checking_1")
        self.assertEqual(checking["balance"], 50000.0)

    def test_transfer_funds_unknown_account(self):
        result = self.run_tool(
            "transfer-funds",
            customerId="cust_123",
            fromAccountId="acc_checking_1",
            toAccountId="acc_ghost",
            amount=5,
        )
        self.assertEqual(result["error"], "AccountNotFound")

    def test_transfer_funds_argument_validation(self):
        negative = self.run_tool(
            "transfer-funds",
            customerId="cust_123",
            fromAccountId="acc_checking_1",
            toAccountId="acc_savings_1",
            amount=-5,
        )
        missing = self.run_tool("transfer-funds", customerId="cust_123", amount=5)
        unexpected = self.run_tool(
            "transfer-funds",
            customerId="cust_123",
            fromAccountId="acc_checking_1",
            toAccountId="acc_savings_1",
            amount=5,
            memo="rent",
        )

        for result in (negative, missing, unexpected):
            self.assertEqual(result["error"], "ValidationError")
        self.assertEqual(self.ledger.find_account("cust_123", "acc_checking_1").balance, 50000)

    def test_deep_research(self):
        spending = self.run_tool("deep-research", customerId="cust_123", query="spending trends")
        quarter = self.run_tool("deep-research", customerId="cust_123", query="quarterly results")
        other = self.run_tool("deep-research", customerId="cust_123", query="overall health")

        self.assertTrue(spending["analysis"].startswith("Deep research analysis for Acme Corp:\n"))
        self.assertIn("Spending has increased by 15%", spending["analysis"])
        self.assertIn("Q3 results show a net positive cash flow", quarter["analysis"])
        self.assertIn("financial health is stable", other["analysis"])

    def test_deep_research_prefers_spending_keyword(self):
        result = self.run_tool("deep-research", customerId="cust_123", query="spending this quarter")
        self.assertIn("Spending has increased", result["analysis"])

    def test_deep_research_unknown_customer(self):
        result = self.run_tool("deep-research", customerId="cust_000", query="spending")
        self.assertEqual(result["error"], "CustomerNotFound")

    def test_dispute_disabled(self):
        result = self.run_tool("transaction-dispute", customerId="cust_123", transactionId="tx_3", reason="Not me")

        self.assertEqual(result["status"], "failed")
        self.assertEqual(result["message"], "Transaction dispute feature is currently unavailable.")
        self.assertNotIn("ticketId", result)
        self.assertEqual(self.flags.calls, ["transaction_dispute"])

    def test_dispute_enabled(self):
        self.flags.enabled = True
        result = self.run_tool("transaction-dispute", customerId="cust_123", transactionId="tx_3", reason="Not me")

        self.assertEqual(result["status"], "Dispute initiated")
        self.assertTrue(result["ticketId"].startswith("ticket_tx_3_"))

    def test_dispute_checks_flag_every_time(self):
        self.run_tool("transaction-dispute", customerId="cust_123", transactionId="tx_1", reason="a")
        self.flags.enabled = True
        result = self.run_tool("transaction-dispute", customerId="cust_123", transactionId="tx_1", reason="b")

        self.assertEqual(result["status"], "Dispute initiated")
        self.assertEqual(len(self.flags.calls), 2)

    def test_common_support(self):
        self.assertIn("maintenance fee", self.run_tool("common-support", topic="What are your FEES?")["info"])
        self.assertIn("9am-5pm", self.run_tool("common-support", topic="branch hours")["info"])
        self.assertIn("LOST-CARD", self.run_tool("common-support", topic="lost cards")["info"])
        self.assertEqual(
            self.run_tool("common-support", topic="mortgage rates")["info"],
            "Please contact our support hotline for this specific issue.",
        )

    def test_unknown_tool(self):
        result = self.run_tool("launch-rocket")
        self.assertEqual(result["error"], "ToolNotFound")

    def test_tool_lookup_ignores_case(self):
        result = self.run_tool("LIST-ACCOUNTS", customerId="cust_123")
        self.assertEqual(len(result["accounts"]), 2)

    def test_unexpected_exception_becomes_tool_error(self):
        self.server.register_tool(BrokenTool())
        result = self.run_tool("broken")
        self.assertEqual(result["error"], "ToolError")
        self.assertIn("boom", result["message"])

    def test_tool_specs(self):
        specs = {spec.name: spec for spec in self.server.tool_specs()}

        self.assertEqual(
            set(specs),
            {
                "list-accounts",
                "get-account-balance",
                "list-transactions",
                "transfer-funds",
                "deep-research",
                "transaction-dispute",
                "common-support",
            },
        )
        transfer = specs["transfer-funds"].parameters
        self.assertEqual(
            set(transfer["required"]), {"customerId", "fromAccountId", "toAccountId", "amount"}
        )
        transactions = specs["list-transactions"].parameters
        self.assertNotIn("limit", transactions.get("required", []))
        self.assertIn("limit", transactions["properties"])


if __name__ == '__main__':
    unittest.main()
