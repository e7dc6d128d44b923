"""Hosting package lifecycle, configuration and stack user capabilities."""

from typing import Any, Dict, List

from twentyi_mcp.modules.registry import (
    CapabilityDescriptor,
    Handler,
    object_arg,
    string_arg,
    string_array_arg,
)
from twentyi_mcp.modules.upstream import UpstreamResponse
from twentyi_mcp.modules.validation import (
    optional,
    require_object,
    require_string,
    require_string_array,
)

from .base import BaseCapabilityModule, compact, segment


def package_id_arg(description: str = "The hosting package ID"):
    return string_arg("package_id", description)


class PackagesModule(BaseCapabilityModule):
    name = "packages"

    async def list_hosting_packages(self, args: Dict[str, Any]) -> UpstreamResponse:
        return await self.client.get("/package")

    async def get_hosting_package_info(self, args: Dict[str, Any]) -> UpstreamResponse:
        return await self.client.get(self._package_path(args))

    async def create_hosting_package(self, args: Dict[str, Any]) -> UpstreamResponse:
        package_data = compact({
            "domain_name": require_string(args.get("domain_name"), "domain_name"),
            "package_type": require_string(args.get("package_type"), "package_type"),
            "username": require_string(args.get("username"), "username"),
            "password": require_string(args.get("password"), "password"),
            "extra_domain_names": optional(
                args.get("extra_domain_names"), require_string_array, "extra_domain_names"
            ),
            "documentRoots": optional(args.get("documentRoots"), require_object, "documentRoots"),
            "stackUser": optional(args.get("stack_user"), require_string, "stack_user"),
        })

        reseller_id = await self.reseller_id()
        return await self.client.post(f"/reseller/{reseller_id}/addWeb", package_data)

    async def get_hosting_package_web_info(self, args: Dict[str, Any]) -> UpstreamResponse:
        return await self.client.get(self._package_path(args, "web"))

    async def get_hosting_package_limits(self, args: Dict[str, Any]) -> UpstreamResponse:
        return await self.client.get(self._package_path(args, "limits"))

    async def get_hosting_package_usage(self, args: Dict[str, Any]) -> UpstreamResponse:
        return await self.client.get(self._package_path(args, "web/usage"))

    async def update_hosting_package(self, args: Dict[str, Any]) -> UpstreamResponse:
        path = self._package_path(args)
        update_data = require_object(args.get("update_data"), "update_data")
        return await self.client.post(path, update_data)

    async def delete_hosting_package(self, args: Dict[str, Any]) -> UpstreamResponse:
        return await self.client.delete(self._package_path(args))

    async def get_package_types(self, args: Dict[str, Any]) -> UpstreamResponse:
        reseller_id = await self.reseller_id()
        return await self.client.get(f"/reseller/{reseller_id}/packageTypes")

    async def get_package_configuration(self, args: Dict[str, Any]) -> UpstreamResponse:
        return await self.client.get(self._package_path(args, "config"))

    async def update_package_configuration(self, args: Dict[str, Any]) -> UpstreamResponse:
        path = self._package_path(args, "config")
        configuration = require_object(args.get("configuration"), "configuration")
        return await self.client.post(path, configuration)

    async def get_package_services(self, args: Dict[str, Any]) -> UpstreamResponse:
        return await self.client.get(self._package_path(args, "services"))

    async def get_package_disk_usage(self, args: Dict[str, Any]) -> UpstreamResponse:
        return await self.client.get(self._package_path(args, "web/diskUsage"))

    async def get_package_bandwidth_usage(self, args: Dict[str, Any]) -> UpstreamResponse:
        return await self.client.get(self._package_path(args, "web/bandwidthUsage"))

    async def suspend_package(self, args: Dict[str, Any]) -> UpstreamResponse:
        path = self._package_path(args, "suspend")
        reason = optional(args.get("reason"), require_string, "reason")
        return await self.client.post(path, compact({"reason": reason}))

    async def unsuspend_package(self, args: Dict[str, Any]) -> UpstreamResponse:
        return await self.client.post(self._package_path(args, "unsuspend"), {})

    async def get_package_stack_users(self, args: Dict[str, Any]) -> UpstreamResponse:
        return await self.client.get(self._package_path(args, "stackUsers"))

    async def add_stack_user_to_package(self, args: Dict[str, Any]) -> UpstreamResponse:
        path = self._package_path(args, "stackUsers")
        stack_user = require_string(args.get("stack_user"), "stack_user")
        return await self.client.post(path, {"stackUser": stack_user})

    async def remove_stack_user_from_package(self, args: Dict[str, Any]) -> UpstreamResponse:
        path = self._package_path(args, "stackUsers")
        stack_user = require_string(args.get("stack_user"), "stack_user")
        return await self.client.delete(f"{path}/{segment(stack_user)}")

    def _package_path(self, args: Dict[str, Any], suffix: str = "") -> str:
        package_id = require_string(args.get("package_id"), "package_id")
        path = f"/package/{segment(package_id)}"
        return f"{path}/{suffix}" if suffix else path

    def handlers(self) -> Dict[str, Handler]:
        return {
            "list_hosting_packages": self.list_hosting_packages,
            "get_hosting_package_info": self.get_hosting_package_info,
            "create_hosting_package": self.create_hosting_package,
            "get_hosting_package_web_info": self.get_hosting_package_web_info,
            "get_hosting_package_limits": self.get_hosting_package_limits,
            "get_hosting_package_usage": self.get_hosting_package_usage,
            "update_hosting_package": self.update_hosting_package,
            "delete_hosting_package": self.delete_hosting_package,
            "get_package_types": self.get_package_types,
            "get_package_configuration": self.get_package_configuration,
            "update_package_configuration": self.update_package_configuration,
            "get_package_services": self.get_package_services,
            "get_package_disk_usage": self.get_package_disk_usage,
            "get_package_bandwidth_usage": self.get_package_bandwidth_usage,
            "suspend_package": self.suspend_package,
            "unsuspend_package": self.unsuspend_package,
            "get_package_stack_users": self.get_package_stack_users,
            "add_stack_user_to_package": self.add_stack_user_to_package,
            "remove_stack_user_from_package": self.remove_stack_user_from_package,
        }

    def descriptors(self) -> List[CapabilityDescriptor]:
        return [
            CapabilityDescriptor(
                name="list_hosting_packages",
                description="List all hosting packages in the reseller account",
            ),
            CapabilityDescriptor(
                name="get_hosting_package_info",
                description="Get detailed information about a specific hosting package",
                arguments=[package_id_arg("The hosting package ID to get information for")],
            ),
            CapabilityDescriptor(
                name="create_hosting_package",
                description="Create a new hosting package",
                arguments=[
                    string_arg("domain_name", "Primary domain name for the hosting package"),
                    string_arg(
                        "package_type",
                        "Type of hosting package (get available types from get_package_types)",
                    ),
                    string_arg("username", "Username for the hosting account"),
                    string_arg("password", "Password for the hosting account"),
                    string_array_arg(
                        "extra_domain_names",
                        "Additional domain names to add to the package",
                        required=False,
                    ),
                    object_arg(
                        "documentRoots", "Document root mappings for domains", required=False
                    ),
                    string_arg(
                        "stack_user", "Stack user to grant access to the package", required=False
                    ),
                ],
            ),
            CapabilityDescriptor(
                name="get_hosting_package_web_info",
                description="Get web-specific information for a hosting package",
                arguments=[package_id_arg()],
            ),
            CapabilityDescriptor(
                name="get_hosting_package_limits",
                description="Get resource limits for a hosting package",
                arguments=[package_id_arg()],
            ),
            CapabilityDescriptor(
                name="get_hosting_package_usage",
                description="Get resource usage statistics for a hosting package",
                arguments=[package_id_arg()],
            ),
            CapabilityDescriptor(
                name="update_hosting_package",
                description="Update hosting package settings",
                arguments=[
                    package_id_arg("The hosting package ID to update"),
                    object_arg("update_data", "Package settings to update"),
                ],
            ),
            CapabilityDescriptor(
                name="delete_hosting_package",
                description="Delete a hosting package (irreversible)",
                arguments=[package_id_arg("The hosting package ID to delete")],
            ),
            CapabilityDescriptor(
                name="get_package_types",
                description="List the hosting package types available to the reseller",
            ),
            CapabilityDescriptor(
                name="get_package_configuration",
                description="Get configuration settings for a hosting package",
                arguments=[package_id_arg()],
            ),
            CapabilityDescriptor(
                name="update_package_configuration",
                description="Update configuration settings for a hosting package",
                arguments=[
                    package_id_arg(),
                    object_arg("configuration", "Configuration settings to apply"),
                ],
            ),
            CapabilityDescriptor(
                name="get_package_services",
                description="List services enabled on a hosting package",
                arguments=[package_id_arg()],
            ),
            CapabilityDescriptor(
                name="get_package_disk_usage",
                description="Get disk usage for a hosting package",
                arguments=[package_id_arg()],
            ),
            CapabilityDescriptor(
                name="get_package_bandwidth_usage",
                description="Get bandwidth usage for a hosting package",
                arguments=[package_id_arg()],
            ),
            CapabilityDescriptor(
                name="suspend_package",
                description="Suspend a hosting package",
                arguments=[
                    package_id_arg("The hosting package ID to suspend"),
                    string_arg("reason", "Reason for suspension (optional)", required=False),
                ],
            ),
            CapabilityDescriptor(
                name="unsuspend_package",
                description="Unsuspend a hosting package",
                arguments=[package_id_arg("The hosting package ID to unsuspend")],
            ),
            CapabilityDescriptor(
                name="get_package_stack_users",
                description="List stack users with access to a hosting package",
                arguments=[package_id_arg()],
            ),
            CapabilityDescriptor(
                name="add_stack_user_to_package",
                description="Grant a stack user access to a hosting package",
                arguments=[
                    package_id_arg(),
                    string_arg("stack_user", "Stack user identifier to add"),
                ],
            ),
            CapabilityDescriptor(
                name="remove_stack_user_from_package",
                description="Revoke a stack user's access to a hosting package",
                arguments=[
                    package_id_arg(),
                    string_arg("stack_user", "Stack user identifier to remove"),
                ],
            ),
        ]
