"""Domain registration, transfer and DNS capabilities."""

from typing import Any, Dict, List

from twentyi_mcp.modules.registry import (
    CapabilityDescriptor,
    Handler,
    boolean_arg,
    enum_arg,
    number_arg,
    object_arg,
    string_arg,
    string_array_arg,
)
from twentyi_mcp.modules.upstream import UpstreamResponse
from twentyi_mcp.modules.validation import (
    optional,
    require_boolean,
    require_domain_name,
    require_email,
    require_enum_member,
    require_object,
    require_positive_number,
    require_string,
    require_string_array,
)

from .base import BaseCapabilityModule, compact, explain_status, segment

DNS_RECORD_TYPES = ("A", "AAAA", "CNAME", "MX", "TXT", "NS", "SRV")
DEFAULT_DNS_TTL = 3600

CONTACT_FIELDS = ("name", "address", "city", "sp", "pc", "cc", "telephone")

PACKAGE_DOMAIN_ARGS = (
    string_arg("package_id", "Package ID containing the domain"),
    string_arg("domain_id", "Domain ID"),
)


class DomainsModule(BaseCapabilityModule):
    name = "domains"

    async def list_domains(self, args: Dict[str, Any]) -> UpstreamResponse:
        return await self.client.get("/domain")

    async def get_domain_info(self, args: Dict[str, Any]) -> UpstreamResponse:
        domain_id = require_string(args.get("domain_id"), "domain_id")
        reseller_id = await self.reseller_id()
        return await self.client.get(f"/reseller/{reseller_id}/domain/{segment(domain_id)}")

    async def register_domain(self, args: Dict[str, Any]) -> UpstreamResponse:
        name = require_domain_name(args.get("name"), "name")
        years = require_positive_number(args.get("years"), "years")
        contact = require_object(args.get("contact"), "contact")

        validated_contact = {
            field: require_string(contact.get(field), f"contact.{field}")
            for field in CONTACT_FIELDS
        }
        validated_contact["email"] = require_email(contact.get("email"), "contact.email")
        validated_contact["organisation"] = optional(
            contact.get("organisation"), require_string, "contact.organisation"
        )

        domain_data = compact({
            "name": name,
            "years": years,
            "contact": compact(validated_contact),
            "privacyService": optional(args.get("privacy_service"), require_boolean, "privacy_service"),
            "nameservers": optional(args.get("nameservers"), require_string_array, "nameservers"),
            "stackUser": optional(args.get("stack_user"), require_string, "stack_user"),
        })

        reseller_id = await self.reseller_id()
        return await self.client.post(f"/reseller/{reseller_id}/addDomain", domain_data)

    async def search_domains(self, args: Dict[str, Any]) -> UpstreamResponse:
        search_term = require_string(args.get("search_term"), "search_term")
        suggestions = optional(args.get("suggestions"), require_boolean, "suggestions")
        tlds = optional(args.get("tlds"), require_string_array, "tlds")

        params = {}
        if suggestions is not None:
            params["suggestions"] = "true" if suggestions else "false"
        if tlds:
            params["tlds"] = ",".join(tlds)

        response = await self.client.get(
            f"/domain-search/{segment(search_term)}", params=params or None
        )
        return explain_status(
            response, {429: "Domain search rate limit exceeded. Please try again later."}
        )

    async def get_domain_verification_status(self, args: Dict[str, Any]) -> UpstreamResponse:
        return await self.client.get("/domainVerification", default=[], default_on_status=(404,))

    async def resend_domain_verification_email(self, args: Dict[str, Any]) -> UpstreamResponse:
        path = self._package_domain_path(args, "resendVerificationEmail")
        response = await self.client.post(path, {})
        return explain_status(
            response, {404: "Domain not found or verification email not applicable for this domain"}
        )

    async def get_dns_records(self, args: Dict[str, Any]) -> UpstreamResponse:
        domain_id = require_string(args.get("domain_id"), "domain_id")
        reseller_id = await self.reseller_id()
        return await self.client.get(f"/reseller/{reseller_id}/domain/{segment(domain_id)}/dns")

    async def update_dns_record(self, args: Dict[str, Any]) -> UpstreamResponse:
        domain_id = require_string(args.get("domain_id"), "domain_id")
        record_type = require_enum_member(args.get("record_type"), DNS_RECORD_TYPES, "record_type")
        name = require_string(args.get("name"), "name")
        value = require_string(args.get("value"), "value")
        ttl = optional(args.get("ttl"), require_positive_number, "ttl") or DEFAULT_DNS_TTL

        record = {"record_type": record_type, "name": name, "value": value, "ttl": ttl}
        reseller_id = await self.reseller_id()
        return await self.client.post(
            f"/reseller/{reseller_id}/domain/{segment(domain_id)}/dns", record
        )

    async def get_domain_periods(self, args: Dict[str, Any]) -> UpstreamResponse:
        return await self.client.get("/domain-period")

    async def get_domain_premium_types(self, args: Dict[str, Any]) -> UpstreamResponse:
        return await self.client.get("/domainPremiumType")

    async def get_domain_transfer_status(self, args: Dict[str, Any]) -> UpstreamResponse:
        response = await self.client.get(self._package_domain_path(args, "pendingTransferStatus"))
        return explain_status(response, {404: "Domain or transfer status not found"})

    async def get_domain_auth_code(self, args: Dict[str, Any]) -> UpstreamResponse:
        response = await self.client.get(self._package_domain_path(args, "authCode"))
        return explain_status(response, {404: "Domain not found or auth code not available"})

    async def get_domain_whois(self, args: Dict[str, Any]) -> UpstreamResponse:
        response = await self.client.get(self._package_domain_path(args, "whois"))
        return explain_status(response, {404: "Domain not found or WHOIS data not available"})

    async def set_domain_transfer_lock(self, args: Dict[str, Any]) -> UpstreamResponse:
        path = self._package_domain_path(args, "canTransfer")
        enabled = require_boolean(args.get("enabled"), "enabled")
        response = await self.client.post(path, {"enable": enabled})
        return explain_status(response, {404: "Domain not found or transfer lock not available"})

    async def transfer_domain(self, args: Dict[str, Any]) -> UpstreamResponse:
        path = self._package_domain_path(args, "transfer")
        transfer_data = require_object(args.get("transfer_data"), "transfer_data")
        response = await self.client.post(path, transfer_data)
        return explain_status(
            response,
            {
                400: "Invalid domain transfer configuration. Check domain name, "
                "contact details, and auth code."
            },
        )

    def _package_domain_path(self, args: Dict[str, Any], action: str) -> str:
        package_id = require_string(args.get("package_id"), "package_id")
        domain_id = require_string(args.get("domain_id"), "domain_id")
        return f"/package/{segment(package_id)}/domain/{segment(domain_id)}/{action}"

    def handlers(self) -> Dict[str, Handler]:
        return {
            "list_domains": self.list_domains,
            "get_domain_info": self.get_domain_info,
            "register_domain": self.register_domain,
            "search_domains": self.search_domains,
            "get_domain_verification_status": self.get_domain_verification_status,
            "resend_domain_verification_email": self.resend_domain_verification_email,
            "get_dns_records": self.get_dns_records,
            "update_dns_record": self.update_dns_record,
            "get_domain_periods": self.get_domain_periods,
            "get_domain_premium_types": self.get_domain_premium_types,
            "get_domain_transfer_status": self.get_domain_transfer_status,
            "get_domain_auth_code": self.get_domain_auth_code,
            "get_domain_whois": self.get_domain_whois,
            "set_domain_transfer_lock": self.set_domain_transfer_lock,
            "transfer_domain": self.transfer_domain,
        }

    def descriptors(self) -> List[CapabilityDescriptor]:
        return [
            CapabilityDescriptor(
                name="list_domains",
                description="List all domains in the reseller account",
            ),
            CapabilityDescriptor(
                name="get_domain_info",
                description="Get detailed information about a specific domain",
                arguments=[string_arg("domain_id", "The domain ID to get information for")],
            ),
            CapabilityDescriptor(
                name="register_domain",
                description="Register a new domain name",
                arguments=[
                    string_arg("name", "Domain name to register (e.g., example.com)"),
                    number_arg("years", "Number of years to register for", default=1),
                    object_arg(
                        "contact",
                        "Contact information for domain registration",
                        properties=[
                            string_arg("name", "Contact person name"),
                            string_arg("organisation", "Organisation name", required=False),
                            string_arg("address", "Street address"),
                            string_arg("city", "City"),
                            string_arg("sp", "State/Province"),
                            string_arg("pc", "Postal code"),
                            string_arg("cc", "Country code (e.g., GB, US)"),
                            string_arg("telephone", "Phone number"),
                            string_arg("email", "Email address"),
                        ],
                    ),
                    boolean_arg(
                        "privacy_service", "Enable domain privacy protection", required=False
                    ),
                    string_array_arg(
                        "nameservers",
                        "Custom nameservers (defaults to 20i nameservers)",
                        required=False,
                    ),
                    string_arg("stack_user", "Stack user to grant access to", required=False),
                ],
            ),
            CapabilityDescriptor(
                name="search_domains",
                description="Search for domain availability and get suggestions",
                arguments=[
                    string_arg(
                        "search_term",
                        "Domain name (e.g. example.com) or prefix (e.g. example) to "
                        "search across all TLDs",
                    ),
                    boolean_arg("suggestions", "Enable domain name suggestions", required=False),
                    string_array_arg(
                        "tlds",
                        "Specific TLDs to search (defaults to all supported TLDs)",
                        required=False,
                    ),
                ],
            ),
            CapabilityDescriptor(
                name="get_domain_verification_status",
                description="Get verification status for domains requiring verification",
            ),
            CapabilityDescriptor(
                name="resend_domain_verification_email",
                description="Resend verification email for a domain",
                arguments=PACKAGE_DOMAIN_ARGS,
            ),
            CapabilityDescriptor(
                name="get_dns_records",
                description="Get DNS records for a domain",
                arguments=[string_arg("domain_id", "Domain ID to get DNS records for")],
            ),
            CapabilityDescriptor(
                name="update_dns_record",
                description="Update or add a DNS record for a domain",
                arguments=[
                    string_arg("domain_id", "Domain ID to update DNS record for"),
                    enum_arg("record_type", DNS_RECORD_TYPES, "Type of DNS record"),
                    string_arg("name", "DNS record name (subdomain or @ for root)"),
                    string_arg("value", "DNS record value (IP address, hostname, etc.)"),
                    number_arg(
                        "ttl", "Time to live in seconds", required=False, default=DEFAULT_DNS_TTL
                    ),
                ],
            ),
            CapabilityDescriptor(
                name="get_domain_periods",
                description="List all possible domain periods supported for registration",
            ),
            CapabilityDescriptor(
                name="get_domain_premium_types",
                description="List all domain extensions with their associated premium group",
            ),
            CapabilityDescriptor(
                name="get_domain_transfer_status",
                description="Get the transfer status of a domain",
                arguments=PACKAGE_DOMAIN_ARGS,
            ),
            CapabilityDescriptor(
                name="get_domain_auth_code",
                description="Get the authorization code (EPP code) for a domain",
                arguments=PACKAGE_DOMAIN_ARGS,
            ),
            CapabilityDescriptor(
                name="get_domain_whois",
                description="Get WHOIS information for a domain",
                arguments=PACKAGE_DOMAIN_ARGS,
            ),
            CapabilityDescriptor(
                name="set_domain_transfer_lock",
                description="Enable or disable transfer lock for a domain",
                arguments=PACKAGE_DOMAIN_ARGS + (
                    boolean_arg("enabled", "Enable (true) or disable (false) transfer lock"),
                ),
            ),
            CapabilityDescriptor(
                name="transfer_domain",
                description="Transfer a domain to this account",
                arguments=PACKAGE_DOMAIN_ARGS + (
                    object_arg(
                        "transfer_data",
                        "Transfer configuration including auth code and contact details",
                    ),
                ),
            ),
        ]
