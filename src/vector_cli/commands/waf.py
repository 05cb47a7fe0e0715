"""Web application firewall commands."""

from __future__ import annotations

from vector_cli.registry import (
    EndpointDescriptor,
    FieldSpec,
    FieldType,
    body,
    detail_shape,
    list_shape,
    message_shape,
)
from vector_cli.services import formatters

RATE_LIMIT_LIST = list_shape(
    "waf-rate-limit-list",
    [
        ("id", "ID"),
        ("name", "Name"),
        ("configuration", "Requests/Time", formatters.rate),
        ("configuration.block_time", "Block Time", formatters.seconds),
    ],
    empty="No rate limit rules found.",
)

RATE_LIMIT_DETAIL = detail_shape(
    "waf-rate-limit-detail",
    [
        ("id", "ID"),
        ("name", "Name"),
        ("description", "Description"),
        ("configuration.request_count", "Request Count"),
        ("configuration.timeframe", "Timeframe (s)"),
        ("configuration.block_time", "Block Time (s)"),
        ("configuration.value", "Value"),
        ("configuration.operator", "Operator"),
        ("configuration.variables", "Variables", formatters.joined),
        ("configuration.transformations", "Transformations", formatters.joined),
    ],
)


def rate_limit_fields(required: bool) -> tuple[FieldSpec, ...]:
    return (
        body("name", required=required, help="Rule name"),
        body("description", help="Rule description"),
        body("request_count", FieldType.INTEGER, required=required,
             help="Requests allowed per timeframe"),
        body("timeframe", FieldType.INTEGER, required=required, help="Timeframe in seconds"),
        body("block_time", FieldType.INTEGER, required=required, help="Block duration in seconds"),
        body("value", help="Match value"),
        body("operator", help="Match operator"),
        body("variables", FieldType.LIST, help="Request variables to inspect"),
        body("transformations", FieldType.LIST, help="Transformations to apply"),
    )


def address_list(noun, path, key, header, label, listing, empty):
    """list/add/remove for one of the WAF hostname or IP lists."""
    return (
        EndpointDescriptor(
            ("waf", noun), "list", "GET", f"/sites/{{site_id}}/waf/{path}",
            params=("site_id",),
            shape=list_shape(f"waf-{noun}-list", [(key, header)], empty=empty),
            help=f"List {noun.replace('-', ' ')}s",
        ),
        EndpointDescriptor(
            ("waf", noun), "add", "POST", f"/sites/{{site_id}}/waf/{path}",
            params=("site_id",),
            shape=message_shape(f"waf-{noun}-added", f"{label} {{{key}}} added to {listing}."),
            fields=(body(key, required=True, help=f"{header} to add"),),
            help=f"Add to the {listing}",
        ),
        EndpointDescriptor(
            ("waf", noun), "remove", "DELETE", f"/sites/{{site_id}}/waf/{path}/{{{key}}}",
            params=("site_id", key),
            shape=message_shape(f"waf-{noun}-removed", f"{label} {{{key}}} removed from {listing}."),
            help=f"Remove from the {listing}",
        ),
    )


DESCRIPTORS = (
    EndpointDescriptor(
        ("waf", "rate-limit"), "list", "GET", "/sites/{site_id}/waf/rate-limits",
        params=("site_id",),
        shape=RATE_LIMIT_LIST,
        help="List rate limit rules",
    ),
    EndpointDescriptor(
        ("waf", "rate-limit"), "show", "GET", "/sites/{site_id}/waf/rate-limits/{rule_id}",
        params=("site_id", "rule_id"),
        shape=RATE_LIMIT_DETAIL,
        help="Show a rate limit rule",
    ),
    EndpointDescriptor(
        ("waf", "rate-limit"), "create", "POST", "/sites/{site_id}/waf/rate-limits",
        params=("site_id",),
        shape=message_shape("waf-rate-limit-created", "Rate limit created: {name} (ID: {id})"),
        fields=rate_limit_fields(required=True),
        help="Create a rate limit rule",
    ),
    EndpointDescriptor(
        ("waf", "rate-limit"), "update", "PUT", "/sites/{site_id}/waf/rate-limits/{rule_id}",
        params=("site_id", "rule_id"),
        shape=message_shape("waf-rate-limit-updated", "Rate limit updated successfully."),
        fields=rate_limit_fields(required=False),
        help="Update a rate limit rule",
    ),
    EndpointDescriptor(
        ("waf", "rate-limit"), "delete", "DELETE", "/sites/{site_id}/waf/rate-limits/{rule_id}",
        params=("site_id", "rule_id"),
        shape=message_shape("waf-rate-limit-deleted", "Rate limit deleted successfully."),
        help="Delete a rate limit rule",
    ),
    *address_list("blocked-ip", "blocked-ips", "ip", "IP", "IP", "blocklist",
                  "No blocked IPs found."),
    *address_list("blocked-referrer", "blocked-referrers", "hostname", "Hostname", "Referrer",
                  "blocklist", "No blocked referrers found."),
    *address_list("allowed-referrer", "allowed-referrers", "hostname", "Hostname", "Referrer",
                  "allowlist", "No allowed referrers found."),
)
