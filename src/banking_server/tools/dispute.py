import logging
import time

from pydantic import Field

from ..flags import TRANSACTION_DISPUTE_FLAG, FeatureFlagOracle
from .base import BankingTool, ToolInput

logger = logging.getLogger(__name__)


class DisputeInput(ToolInput):
    customer_id: str = Field(alias="customerId")
    transaction_id: str = Field(alias="transactionId")
    reason: str


class TransactionDisputeTool(BankingTool):
    """Open a dispute ticket, if the transaction_dispute flag allows it."""

    name = "transaction-dispute"
    description = "Initiate a dispute for a specific transaction."
    input_model = DisputeInput

    def __init__(self, flags: FeatureFlagOracle):
        self.flags = flags

    def execute(self, customer_id, transaction_id, reason):
        if not self.flags.is_enabled(TRANSACTION_DISPUTE_FLAG):
            logger.info(f"Dispute for {transaction_id} rejected: feature disabled")
            return {
                "status": "failed",
                "message": "Transaction dispute feature is currently unavailable.",
            }

        ticket_id = f"ticket_{transaction_id}_{int(time.time() * 1000)}"
        logger.info(f"Dispute {ticket_id} opened for customer {customer_id}: {reason}")
        return {"status": "Dispute initiated", "ticketId": ticket_id}
