"""
Gross Insurance OSAGO adapter.

Gross has not published a calculation endpoint for partners yet, so the
adapter answers with an explicit "not implemented" failure and never touches
the network.
"""

from __future__ import annotations

from typing import Dict

from quotehub.integrations.contracts.interfaces import ProviderAdapter, ProviderResult
from quotehub.integrations.contracts.quotes import ProviderQuoteInput
from quotehub.integrations.errors import ProviderNotConfiguredError
from quotehub.utils.config_loader import GrossSettings

NOT_WIRED_MESSAGE = "Gross calculation endpoint is not defined. Provide Gross calc API to enable."


class GrossClient(ProviderAdapter):
    name = "gross"
    display_name = "Gross"
    supported_periods = (6, 12)

    def __init__(self, settings: GrossSettings) -> None:
        self.settings = settings

    def required_settings(self) -> Dict[str, str]:
        return {
            "GROSS_BASE_URL": self.settings.base_url,
            "GROSS_LOGIN": self.settings.login,
            "GROSS_PASSWORD": self.settings.password,
        }

    async def calculate(self, quote: ProviderQuoteInput) -> ProviderResult:
        raise ProviderNotConfiguredError(NOT_WIRED_MESSAGE)
