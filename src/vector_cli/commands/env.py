"""Environment, environment secret and environment database commands."""

from __future__ import annotations

from vector_cli.commands.db import import_commands
from vector_cli.registry import (
    PAGINATION,
    EndpointDescriptor,
    FieldType,
    body,
    detail_shape,
    list_shape,
    message_shape,
)
from vector_cli.services import formatters

ENV_LIST = list_shape(
    "env-list",
    [
        ("id", "ID"),
        ("name", "Name"),
        ("status", "Status"),
        ("is_production", "Production", formatters.yes_no),
        ("fqdn", "FQDN"),
    ],
    empty="No environments found.",
)

ENV_DETAIL = detail_shape(
    "env-detail",
    [
        ("id", "ID"),
        ("name", "Name"),
        ("status", "Status"),
        ("is_production", "Production", formatters.yes_no),
        ("php_version", "PHP Version"),
        ("fqdn", "FQDN"),
        ("custom_domain", "Custom Domain"),
        ("subdomain", "Subdomain"),
        ("tags", "Tags", formatters.joined),
        ("created_at", "Created"),
        ("updated_at", "Updated"),
    ],
)

SECRET_LIST = list_shape(
    "secret-list",
    [
        ("id", "ID"),
        ("key", "Key"),
        ("is_secret", "Secret", formatters.yes_no),
        ("value", "Value"),
        ("created_at", "Created"),
    ],
    empty="No secrets found.",
)

SECRET_DETAIL = detail_shape(
    "secret-detail",
    [
        ("id", "ID"),
        ("key", "Key"),
        ("is_secret", "Secret", formatters.yes_no),
        ("value", "Value"),
        ("created_at", "Created"),
        ("updated_at", "Updated"),
    ],
)

PROMOTE_STATUS = detail_shape(
    "env-db-promote",
    [
        ("id", "Promote ID"),
        ("status", "Status"),
        ("duration_ms", "Duration (ms)"),
        ("error_message", "Error"),
        ("created_at", "Created"),
        ("completed_at", "Completed"),
    ],
)

TAGS = "Tags (repeat or comma-separate)"


def secret_fields(required: bool):
    return (
        body("key", required=required, help="Secret key"),
        body("value", required=required, help="Secret value"),
        body("is_secret", FieldType.BOOLEAN, flag="secret", off_flag="no_secret",
             help="Mask the value (use --no-secret for a plain variable)"),
    )


DESCRIPTORS = (
    EndpointDescriptor(
        ("env",), "list", "GET", "/sites/{site_id}/environments",
        params=("site_id",),
        shape=ENV_LIST,
        fields=PAGINATION,
        help="List environments for a site",
    ),
    EndpointDescriptor(
        ("env",), "show", "GET", "/environments/{env_id}",
        params=("env_id",),
        shape=ENV_DETAIL,
        help="Show environment details",
    ),
    EndpointDescriptor(
        ("env",), "create", "POST", "/sites/{site_id}/environments",
        params=("site_id",),
        shape=message_shape("env-created", "Environment created: {name} ({id})"),
        fields=(
            body("name", required=True, help="Environment name"),
            body("custom_domain", required=True, help="Custom domain"),
            body("php_version", required=True, help="PHP version"),
            body("is_production", FieldType.BOOLEAN, flag="production",
                 help="Mark as the production environment"),
            body("tags", FieldType.LIST, help=TAGS),
        ),
        help="Create an environment",
    ),
    EndpointDescriptor(
        ("env",), "update", "PUT", "/environments/{env_id}",
        params=("env_id",),
        shape=message_shape("env-updated", "Environment updated successfully."),
        fields=(
            body("name", help="Environment name"),
            body("custom_domain", help="Custom domain"),
            body("tags", FieldType.LIST, help=TAGS),
        ),
        help="Update an environment",
    ),
    EndpointDescriptor(
        ("env",), "delete", "DELETE", "/environments/{env_id}",
        params=("env_id",),
        shape=message_shape("env-deleted", "Environment deleted successfully."),
        help="Delete an environment",
    ),
    EndpointDescriptor(
        ("env",), "reset-db-password", "POST", "/environments/{env_id}/db/reset-password",
        params=("env_id",),
        shape=detail_shape(
            "env-db-credentials",
            [("db_username", "Username"), ("db_password", "Password")],
        ),
        help="Reset the environment database password",
    ),
    EndpointDescriptor(
        ("env", "secret"), "list", "GET", "/environments/{env_id}/secrets",
        params=("env_id",),
        shape=SECRET_LIST,
        fields=PAGINATION,
        help="List environment secrets",
    ),
    EndpointDescriptor(
        ("env", "secret"), "show", "GET", "/secrets/{secret_id}",
        params=("secret_id",),
        shape=SECRET_DETAIL,
        help="Show a secret",
    ),
    EndpointDescriptor(
        ("env", "secret"), "create", "POST", "/environments/{env_id}/secrets",
        params=("env_id",),
        shape=message_shape("secret-created", "Secret created: {key} ({id})"),
        fields=secret_fields(required=True),
        help="Create an environment secret",
    ),
    EndpointDescriptor(
        ("env", "secret"), "update", "PUT", "/secrets/{secret_id}",
        params=("secret_id",),
        shape=message_shape("secret-updated", "Secret updated successfully."),
        fields=secret_fields(required=False),
        help="Update a secret",
    ),
    EndpointDescriptor(
        ("env", "secret"), "delete", "DELETE", "/secrets/{secret_id}",
        params=("secret_id",),
        shape=message_shape("secret-deleted", "Secret deleted successfully."),
        help="Delete a secret",
    ),
    *import_commands(("env", "db"), "/environments/{env_id}", "env_id", "env db"),
    EndpointDescriptor(
        ("env", "db"), "promote", "POST", "/environments/{env_id}/db/promote",
        params=("env_id",),
        shape=message_shape(
            "env-db-promote-started",
            "Promote started: {id} ({status})",
            hints=("Check status with:", "  vector env db promote-status {env_id} {id}"),
        ),
        fields=(
            body("drop_tables", FieldType.BOOLEAN, help="Drop existing tables first"),
            body("disable_foreign_keys", FieldType.BOOLEAN, help="Disable foreign key checks"),
        ),
        help="Promote the development database to this environment",
    ),
    EndpointDescriptor(
        ("env", "db"), "promote-status", "GET", "/environments/{env_id}/db/promotes/{promote_id}",
        params=("env_id", "promote_id"),
        shape=PROMOTE_STATUS,
        help="Check promote status",
    ),
)
