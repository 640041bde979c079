"""
Banking Server Package - The mock banking tools the agent can call.

The package holds the in-memory account ledger, the feature flag oracle,
the tool implementations and the server that registers and executes them.
"""

from .flags import FeatureFlagOracle
from .ledger import Ledger
from .server import BankingToolServer

__all__ = ["BankingToolServer", "FeatureFlagOracle", "Ledger"]
