"""Account events, webhooks and PHP version commands."""

from __future__ import annotations

from vector_cli.registry import (
    PAGINATION,
    EndpointDescriptor,
    FieldType,
    body,
    detail_shape,
    list_shape,
    message_shape,
    query,
)
from vector_cli.services import formatters

EVENT_LIST = list_shape(
    "event-list",
    [
        ("id", "ID"),
        ("event", "Event"),
        ("actor", "Actor", formatters.actor),
        ("resource", "Resource", formatters.resource),
        ("created_at", "Created"),
    ],
    empty="No events found.",
)

WEBHOOK_LIST = list_shape(
    "webhook-list",
    [
        ("id", "ID"),
        ("name", "Name"),
        ("url", "URL"),
        ("enabled", "Enabled", formatters.yes_no),
    ],
    empty="No webhooks found.",
)

WEBHOOK_DETAIL = detail_shape(
    "webhook-detail",
    [
        ("id", "ID"),
        ("name", "Name"),
        ("url", "URL"),
        ("enabled", "Enabled", formatters.yes_no),
        ("events", "Events", formatters.joined),
        ("has_secret", "Has Secret", formatters.yes_no),
        ("created_at", "Created"),
        ("updated_at", "Updated"),
    ],
)

PHP_VERSIONS = list_shape(
    "php-versions",
    [("", "Version")],
    empty="No PHP versions available.",
)

EVENTS = "Event types (repeat or comma-separate)"

DESCRIPTORS = (
    EndpointDescriptor(
        ("event",), "list", "GET", "/events",
        shape=EVENT_LIST,
        fields=(
            query("from", FieldType.DATE, help="Only events after this time (ISO 8601)"),
            query("to", FieldType.DATE, help="Only events before this time (ISO 8601)"),
            query("event", help="Filter by event type"),
            *PAGINATION,
        ),
        help="List account events",
    ),
    EndpointDescriptor(
        ("webhook",), "list", "GET", "/webhooks",
        shape=WEBHOOK_LIST,
        fields=PAGINATION,
        help="List webhooks",
    ),
    EndpointDescriptor(
        ("webhook",), "show", "GET", "/webhooks/{webhook_id}",
        params=("webhook_id",),
        shape=WEBHOOK_DETAIL,
        help="Show webhook details",
    ),
    EndpointDescriptor(
        ("webhook",), "create", "POST", "/webhooks",
        shape=message_shape("webhook-created", "Webhook created: {name} ({id})"),
        fields=(
            body("name", required=True, help="Webhook name"),
            body("url", required=True, help="Delivery URL"),
            body("events", FieldType.LIST, required=True, help=EVENTS),
            body("secret", help="Signing secret"),
        ),
        help="Create a webhook",
    ),
    EndpointDescriptor(
        ("webhook",), "update", "PUT", "/webhooks/{webhook_id}",
        params=("webhook_id",),
        shape=message_shape("webhook-updated", "Webhook updated successfully."),
        fields=(
            body("name", help="Webhook name"),
            body("url", help="Delivery URL"),
            body("events", FieldType.LIST, help=EVENTS),
            body("secret", help="Signing secret"),
            body("enabled", FieldType.BOOLEAN, off_flag="disabled", help="Enable or disable"),
        ),
        help="Update a webhook",
    ),
    EndpointDescriptor(
        ("webhook",), "delete", "DELETE", "/webhooks/{webhook_id}",
        params=("webhook_id",),
        shape=message_shape("webhook-deleted", "Webhook deleted successfully."),
        help="Delete a webhook",
    ),
    EndpointDescriptor(
        ("php",), "versions", "GET", "/php-versions",
        shape=PHP_VERSIONS,
        help="List available PHP versions",
    ),
)
