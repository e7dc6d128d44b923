"""Reseller account capabilities."""

from typing import Any, Dict, List

from twentyi_mcp.modules.registry import CapabilityDescriptor, Handler
from twentyi_mcp.modules.upstream import UpstreamResponse

from .base import BaseCapabilityModule

ZERO_BALANCE_MESSAGE = "Account has zero balance or no balance information available"

# 20i answers 403/404 on accountBalance for accounts without payment history
NO_BALANCE_STATUSES = (403, 404)


def zero_balance(reseller_id: str) -> Dict[str, Any]:
    return {
        "balance": 0,
        "currency": "USD",
        "message": ZERO_BALANCE_MESSAGE,
        "resellerId": reseller_id,
    }


class AccountModule(BaseCapabilityModule):
    name = "account"

    async def get_reseller_info(self, args: Dict[str, Any]) -> UpstreamResponse:
        return await self.reseller_info()

    async def get_account_balance(self, args: Dict[str, Any]) -> UpstreamResponse:
        reseller_id = await self.reseller_id()
        return await self.client.get(
            f"/reseller/{reseller_id}/accountBalance",
            default=zero_balance(reseller_id),
            default_on_status=NO_BALANCE_STATUSES,
        )

    def handlers(self) -> Dict[str, Handler]:
        return {
            "get_reseller_info": self.get_reseller_info,
            "get_account_balance": self.get_account_balance,
        }

    def descriptors(self) -> List[CapabilityDescriptor]:
        return [
            CapabilityDescriptor(
                name="get_reseller_info",
                description="Get reseller account information",
            ),
            CapabilityDescriptor(
                name="get_account_balance",
                description=(
                    "Get account balance and billing information. Accounts with no "
                    "balance report a zero balance."
                ),
            ),
        ]
