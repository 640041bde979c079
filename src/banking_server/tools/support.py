from pydantic import Field

from .base import BankingTool, ToolInput


class SupportInput(ToolInput):
    topic: str = Field(description='The support topic, e.g., "fees", "hours", "cards"')


class CommonSupportTool(BankingTool):
    name = "common-support"
    description = "Provide answers to common banking support questions."
    input_model = SupportInput

    def __init__(self):
        self.knowledge_base = {
            "fees": "Monthly maintenance fee is $10, waived with $5000 minimum balance.",
            "hours": "Branches are open 9am-5pm Mon-Fri.",
            "cards": "To report a lost card, call 1-800-LOST-CARD immediately.",
        }
        self.fallback = "Please contact our support hotline for this specific issue."

    def execute(self, topic):
        topic = topic.lower()
        for key, info in self.knowledge_base.items():
            if key in topic:
                return {"info": info}
        return {"info": self.fallback}
