from pydantic import Field

from ..ledger import Ledger
from .accounts import CustomerInput, LedgerTool


class ResearchInput(CustomerInput):
    query: str = Field(description='Specific aspect to analyze, e.g., "spending trends", "quarterly results"')


class DeepResearchTool(LedgerTool):
    """Canned financial analysis picked by keywords in the query."""

    name = "deep-research"
    description = "Analyze customer history and provide insights on spending trends and financial health."
    input_model = ResearchInput

    def __init__(self, ledger: Ledger):
        super().__init__(ledger)
        # Checked in order, first match wins
        self.analyses = [
            ("spending", "Spending has increased by 15% over the last quarter. Major categories: Software, Marketing."),
            ("quarter", "Q3 results show a net positive cash flow. Savings have grown by 5%."),
        ]
        self.default_analysis = "Customer financial health is stable. Consistent income streams detected."

    def execute(self, customer_id, query):
        customer = self.ledger.find_customer(customer_id)
        analysis = f"Deep research analysis for {customer.name}:\n"
        for keyword, text in self.analyses:
            if keyword in query:
                return {"analysis": analysis + text}
        return {"analysis": analysis + self.default_analysis}
