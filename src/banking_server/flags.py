import logging
import os

import requests
from flagsmith import Flagsmith
from flagsmith.exceptions import FlagsmithClientError, FlagsmithFeatureDoesNotExistError

from .config import load_tool_settings

logger = logging.getLogger(__name__)

TRANSACTION_DISPUTE_FLAG = "transaction_dispute"


class FeatureFlagOracle:
    """Boolean feature flag lookups through the Flagsmith SDK.

    Every lookup asks the flag service for the environment flags; nothing is
    cached. Any failure to reach or understand the service disables the flag
    (fail closed).
    """

    def __init__(self, environment_key=None, api_url=None, timeout=None):
        self.name = "FeatureFlags"
        settings = self._load_settings()
        self.environment_key = environment_key or settings.get("environment_key")
        self.api_url = (api_url or settings.get("api_url")).rstrip("/")
        self.timeout = float(timeout or settings.get("timeout"))
        self.client = self._create_client()

    def _load_settings(self):
        """Load Flagsmith settings from environment variables or config file"""
        file_settings = load_tool_settings(self.name)
        return {
            "environment_key": os.environ.get("FLAGSMITH_ENVIRONMENT_KEY")
            or os.environ.get("FLAGSMITH_SECRET_KEY")
            or file_settings.get("environment_key"),
            "api_url": os.environ.get("FLAGSMITH_API_URL")
            or file_settings.get("api_url", "https://edge.api.flagsmith.com/api/v1"),
            "timeout": os.environ.get("FLAGSMITH_TIMEOUT") or file_settings.get("timeout", 5),
        }

    def _create_client(self):
        if not self.environment_key:
            logger.warning("No Flagsmith environment key configured; all feature flags are disabled")
            return None

        return Flagsmith(
            environment_key=self.environment_key,
            api_url=f"{self.api_url}/",
            request_timeout_seconds=self.timeout,
        )

    def is_enabled(self, flag_name):
        """
        Check whether a feature flag is switched on.

        Args:
            flag_name (str): Flagsmith feature name, e.g. "transaction_dispute"

        Returns:
            bool: The flag state, or False if the flag service cannot be used
        """
        if self.client is None:
            return False

        try:
            flags = self.client.get_environment_flags()
            enabled = bool(flags.is_feature_enabled(flag_name))
        except FlagsmithFeatureDoesNotExistError:
            logger.info(f"Feature flag '{flag_name}' is not defined; treating as disabled")
            return False
        except (FlagsmithClientError, requests.exceptions.RequestException) as e:
            logger.error(f"Error fetching feature flags: {str(e)}")
            return False

        logger.info(f"Feature flag '{flag_name}' evaluated to {enabled}")
        return enabled
