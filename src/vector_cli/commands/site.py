"""Site management commands."""

from __future__ import annotations

from vector_cli.registry import (
    PAGINATION,
    EndpointDescriptor,
    FieldType,
    ResponseShape,
    ShapeKind,
    body,
    detail_shape,
    list_shape,
    message_shape,
    query,
)
from vector_cli.services import formatters

SITE_LIST = list_shape(
    "site-list",
    [
        ("id", "ID"),
        ("status", "Status"),
        ("your_customer_id", "Customer ID"),
        ("dev_domain", "Dev Domain"),
    ],
    empty="No sites found.",
)

SITE_DETAIL = detail_shape(
    "site-detail",
    [
        ("id", "ID"),
        ("status", "Status"),
        ("your_customer_id", "Customer ID"),
        ("dev_domain", "Dev Domain"),
        ("dev_php_version", "Dev PHP Version"),
        ("dev_db_host", "Dev DB Host"),
        ("dev_db_name", "Dev DB Name"),
        ("tags", "Tags", formatters.joined),
        ("created_at", "Created"),
        ("updated_at", "Updated"),
    ],
)

SFTP_CREDENTIALS = detail_shape(
    "sftp-credentials",
    [
        ("hostname", "Hostname"),
        ("port", "Port"),
        ("username", "Username"),
        ("password", "Password"),
    ],
    root="data.dev_sftp",
    empty_message="SFTP password reset successfully.",
)

DB_CREDENTIALS = detail_shape(
    "site-db-credentials",
    [
        ("dev_db_username", "Username"),
        ("dev_db_password", "Password"),
    ],
)

SITE_LOGS = ResponseShape(name="site-logs", kind=ShapeKind.LOG, empty_message="No logs available.")

SSH_KEY_LIST = list_shape(
    "site-ssh-key-list",
    [
        ("id", "ID"),
        ("name", "Name"),
        ("fingerprint", "Fingerprint"),
        ("created_at", "Created"),
    ],
    empty="No SSH keys found.",
)

CUSTOMER_ID = "Your customer reference"
TAGS = "Tags (repeat or comma-separate)"

DESCRIPTORS = (
    EndpointDescriptor(
        ("site",), "list", "GET", "/sites",
        shape=SITE_LIST,
        fields=PAGINATION,
        help="List all sites",
    ),
    EndpointDescriptor(
        ("site",), "show", "GET", "/sites/{site_id}",
        params=("site_id",),
        shape=SITE_DETAIL,
        help="Show site details",
    ),
    EndpointDescriptor(
        ("site",), "create", "POST", "/sites",
        shape=message_shape("site-created", "Site created: {id} ({status})"),
        fields=(
            body("your_customer_id", required=True, flag="customer_id", help=CUSTOMER_ID),
            body("dev_php_version", required=True, flag="php_version", help="PHP version"),
            body("tags", FieldType.LIST, help=TAGS),
        ),
        help="Create a new site",
    ),
    EndpointDescriptor(
        ("site",), "update", "PUT", "/sites/{site_id}",
        params=("site_id",),
        shape=message_shape("site-updated", "Site updated successfully."),
        fields=(
            body("your_customer_id", flag="customer_id", help=CUSTOMER_ID),
            body("tags", FieldType.LIST, help=TAGS),
        ),
        help="Update a site",
    ),
    EndpointDescriptor(
        ("site",), "delete", "DELETE", "/sites/{site_id}",
        params=("site_id",),
        shape=message_shape("site-deleted", "Site deleted successfully."),
        confirm="Are you sure you want to delete site {site_id}?",
        help="Delete a site",
    ),
    EndpointDescriptor(
        ("site",), "clone", "POST", "/sites/{site_id}/clone",
        params=("site_id",),
        shape=message_shape("site-cloned", "Site clone initiated: {id} ({status})"),
        fields=(
            body("your_customer_id", flag="customer_id", help=CUSTOMER_ID),
            body("dev_php_version", flag="php_version", help="PHP version"),
            body("tags", FieldType.LIST, help=TAGS),
        ),
        help="Clone a site",
    ),
    EndpointDescriptor(
        ("site",), "suspend", "PUT", "/sites/{site_id}/suspend",
        params=("site_id",),
        shape=message_shape("site-suspended", "Site suspension initiated."),
        help="Suspend a site",
    ),
    EndpointDescriptor(
        ("site",), "unsuspend", "PUT", "/sites/{site_id}/unsuspend",
        params=("site_id",),
        shape=message_shape("site-unsuspended", "Site unsuspension initiated."),
        help="Unsuspend a site",
    ),
    EndpointDescriptor(
        ("site",), "reset-sftp-password", "POST", "/sites/{site_id}/sftp/reset-password",
        params=("site_id",),
        shape=SFTP_CREDENTIALS,
        help="Reset the SFTP password",
    ),
    EndpointDescriptor(
        ("site",), "reset-db-password", "POST", "/sites/{site_id}/db/reset-password",
        params=("site_id",),
        shape=DB_CREDENTIALS,
        help="Reset the database password",
    ),
    EndpointDescriptor(
        ("site",), "purge-cache", "POST", "/sites/{site_id}/purge-cache",
        params=("site_id",),
        shape=message_shape("cache-purged", "Cache purged successfully."),
        fields=(
            body("cache_tag", help="Purge only this cache tag"),
            body("url", help="Purge only this URL"),
        ),
        help="Purge the site cache",
    ),
    EndpointDescriptor(
        ("site",), "logs", "GET", "/sites/{site_id}/logs",
        params=("site_id",),
        shape=SITE_LOGS,
        fields=(
            query("start_time", FieldType.DATE, help="Start of the time range (ISO 8601)"),
            query("end_time", FieldType.DATE, help="End of the time range (ISO 8601)"),
            query("limit", FieldType.INTEGER, help="Maximum number of entries"),
            query("environment", help="Filter by environment"),
            query("deployment_id", help="Filter by deployment"),
            query("level", help="Filter by log level"),
            query("cursor", help="Continue from a previous page"),
        ),
        help="View site logs",
    ),
    EndpointDescriptor(
        ("site",), "wp-reconfig", "POST", "/sites/{site_id}/wp/reconfig",
        params=("site_id",),
        shape=message_shape("wp-reconfigured", "wp-config.php regenerated successfully."),
        help="Regenerate wp-config.php",
    ),
    EndpointDescriptor(
        ("site", "ssh-key"), "list", "GET", "/sites/{site_id}/ssh-keys",
        params=("site_id",),
        shape=SSH_KEY_LIST,
        fields=PAGINATION,
        help="List SSH keys for a site",
    ),
    EndpointDescriptor(
        ("site", "ssh-key"), "add", "POST", "/sites/{site_id}/ssh-keys",
        params=("site_id",),
        shape=message_shape("site-ssh-key-added", "SSH key added: {name} ({id})"),
        fields=(
            body("name", required=True, help="Key name"),
            body("public_key", required=True, help="Public key contents"),
        ),
        help="Add an SSH key to a site",
    ),
    EndpointDescriptor(
        ("site", "ssh-key"), "remove", "DELETE", "/sites/{site_id}/ssh-keys/{key_id}",
        params=("site_id", "key_id"),
        shape=message_shape("site-ssh-key-removed", "SSH key removed successfully."),
        help="Remove an SSH key from a site",
    ),
)
