"""
Account Ledger - in-memory store of customers, accounts and transactions.

The ledger is an explicitly owned object: the tool server receives one at
construction time, and tests build their own from the seed data so that no
state is shared between them. Balances only change through ``transfer``.
"""

import copy
import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from .types.models import AccountNotFound, CustomerNotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transaction:
    id: str
    date: str
    amount: Decimal
    description: str
    merchant: str
    category: str


@dataclass
class Account:
    id: str
    type: str
    balance: Decimal
    currency: str
    transactions: List[Transaction] = field(default_factory=list)


@dataclass
class Customer:
    id: str
    name: str
    email: str
    accounts: List[Account] = field(default_factory=list)


@dataclass
class TransferResult:
    success: bool
    message: str
    transaction_id: str = ""

    def to_dict(self):
        return {
            "success": self.success,
            "message": self.message,
            "transactionId": self.transaction_id,
        }


SEED_CUSTOMERS = [
    Customer(
        id="cust_123",
        name="Acme Corp",
        email="contact@acme.com",
        accounts=[
            Account(
                id="acc_checking_1",
                type="checking",
                balance=Decimal("50000.00"),
                currency="USD",
                transactions=[
                    Transaction("tx_1", "2023-10-01", Decimal("-1500.00"), "Office Supplies", "Staples", "expenses"),
                    Transaction("tx_2", "2023-10-05", Decimal("12000.00"), "Client Payment - Project X", "Client A", "income"),
                    Transaction("tx_3", "2023-10-10", Decimal("-500.00"), "Lunch Meeting", "Bistro 55", "meals"),
                    Transaction("tx_4", "2023-10-12", Decimal("-200.00"), "Subscription", "SaaS Tool", "software"),
                ],
            ),
            Account(
                id="acc_savings_1",
                type="savings",
                balance=Decimal("120000.00"),
                currency="USD",
            ),
        ],
    ),
]


def to_decimal(amount) -> Decimal:
    """Convert a JSON number or string to a Decimal without float artefacts."""
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def synthesize_transaction_id() -> str:
    return f"tx_transfer_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"


class Ledger:
    """Customers and their accounts, with lock-guarded transfers."""

    def __init__(self, customers: Optional[List[Customer]] = None):
        self._customers: Dict[str, Customer] = {c.id: c for c in (customers or [])}
        self._locks_guard = threading.Lock()
        self._account_locks: Dict[str, threading.Lock] = {}

    @classmethod
    def with_seed_data(cls) -> "Ledger":
        """Build a ledger holding a private copy of the demo customers."""
        return cls(copy.deepcopy(SEED_CUSTOMERS))

    def customers(self) -> List[Customer]:
        return list(self._customers.values())

    def find_customer(self, customer_id: str) -> Customer:
        customer = self._customers.get(customer_id)
        if customer is None:
            raise CustomerNotFound(customer_id)
        return customer

    def find_account(self, customer_id: str, account_id: str) -> Account:
        customer = self.find_customer(customer_id)
        for account in customer.accounts:
            if account.id == account_id:
                return account
        raise AccountNotFound(account_id, customer_id)

    def _lock_for(self, account_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._account_locks.get(account_id)
            if lock is None:
                lock = self._account_locks[account_id] = threading.Lock()
            return lock

    def transfer(self, customer_id, from_account_id, to_account_id, amount) -> TransferResult:
        """
        Move money between two accounts of the same customer.

        Insufficient funds is a business outcome and comes back as an
        unsuccessful TransferResult; unknown accounts raise AccountNotFound.

        Args:
            customer_id (str): Owner of both accounts
            from_account_id (str): Account to debit
            to_account_id (str): Account to credit
            amount: Positive amount, as a number, string or Decimal

        Returns:
            TransferResult: Outcome of the transfer
        """
        amount = to_decimal(amount)
        if amount <= 0:
            raise ValueError("Transfer amount must be greater than zero")

        try:
            from_account = self.find_account(customer_id, from_account_id)
            to_account = self.find_account(customer_id, to_account_id)
        except CustomerNotFound:
            raise AccountNotFound(from_account_id, customer_id) from None

        if from_account is to_account:
            return TransferResult(False, "Source and destination accounts must be different.")

        # Lock ordering by account id keeps two opposite transfers from deadlocking
        first, second = sorted((from_account.id, to_account.id))
        with self._lock_for(first), self._lock_for(second):
            if from_account.balance < amount:
                logger.info(
                    "Transfer of %s from %s declined: insufficient funds", amount, from_account.id
                )
                return TransferResult(False, "Insufficient funds.")

            transaction_id = synthesize_transaction_id()
            today = date.today().isoformat()
            from_account.balance -= amount
            to_account.balance += amount
            from_account.transactions.append(
                Transaction(transaction_id, today, -amount, f"Transfer to {to_account.id}", "Internal Transfer", "transfer")
            )
            to_account.transactions.append(
                Transaction(transaction_id, today, amount, f"Transfer from {from_account.id}", "Internal Transfer", "transfer")
            )

        logger.info("Transferred %s from %s to %s (%s)", amount, from_account.id, to_account.id, transaction_id)
        return TransferResult(
            True,
            f"Successfully transferred {amount} from {from_account.id} to {to_account.id}",
            transaction_id,
        )
