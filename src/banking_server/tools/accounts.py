import logging
from decimal import Decimal
from typing import Optional

from pydantic import Field

from ..ledger import Ledger
from .base import BankingTool, ToolInput, as_number

logger = logging.getLogger(__name__)


class CustomerInput(ToolInput):
    customer_id: str = Field(alias="customerId")


class AccountInput(CustomerInput):
    account_id: str = Field(alias="accountId")


class TransactionsInput(AccountInput):
    limit: Optional[int] = Field(default=5, ge=1, description="Maximum number of transactions to return")


class TransferInput(CustomerInput):
    from_account_id: str = Field(alias="fromAccountId")
    to_account_id: str = Field(alias="toAccountId")
    amount: Decimal = Field(gt=0)


class LedgerTool(BankingTool):
    """A tool that reads or mutates the account ledger."""

    def __init__(self, ledger: Ledger):
        self.ledger = ledger


class ListAccountsTool(LedgerTool):
    name = "list-accounts"
    description = "List all accounts for a customer."
    input_model = CustomerInput

    def execute(self, customer_id):
        customer = self.ledger.find_customer(customer_id)
        return {
            "accounts": [
                {
                    "id": account.id,
                    "type": account.type,
                    "balance": as_number(account.balance),
                    "currency": account.currency,
                }
                for account in customer.accounts
            ]
        }


class GetAccountBalanceTool(LedgerTool):
    name = "get-account-balance"
    description = "Get the balance of a specific account."
    input_model = AccountInput

    def execute(self, customer_id, account_id):
        account = self.ledger.find_account(customer_id, account_id)
        return {"balance": as_number(account.balance), "currency": account.currency}


class ListTransactionsTool(LedgerTool):
    name = "list-transactions"
    description = "List transactions for a specific account."
    input_model = TransactionsInput

    def execute(self, customer_id, account_id, limit=5):
        account = self.ledger.find_account(customer_id, account_id)
        # An explicit null from the model means "use the default"
        transactions = account.transactions[: limit or 5]
        return {
            "transactions": [
                {
                    "id": tx.id,
                    "date": tx.date,
                    "amount": as_number(tx.amount),
                    "description": tx.description,
                    "merchant": tx.merchant,
                    "category": tx.category,
                }
                for tx in transactions
            ]
        }


class TransferFundsTool(LedgerTool):
    name = "transfer-funds"
    description = "Transfer funds between two accounts."
    input_model = TransferInput

    def execute(self, customer_id, from_account_id, to_account_id, amount):
        logger.info(f"Transfer requested: {amount} from {from_account_id} to {to_account_id} ({customer_id})")
        result = self.ledger.transfer(customer_id, from_account_id, to_account_id, amount)
        return result.to_dict()
