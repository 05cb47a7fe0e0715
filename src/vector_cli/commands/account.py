"""Account-level commands: summary, SSH keys, API keys and global secrets."""

from __future__ import annotations

from vector_cli.commands.env import SECRET_DETAIL, SECRET_LIST, secret_fields
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

ACCOUNT_SUMMARY = detail_shape(
    "account-summary",
    [
        ("owner.name", "Owner Name"),
        ("owner.email", "Owner Email"),
        ("account.name", "Account Name"),
        ("account.company", "Company"),
        ("sites.total", "Total Sites"),
        ("sites.by_status.active", "Active Sites"),
        ("environments.total", "Total Environments"),
        ("environments.by_status.active", "Active Environments"),
    ],
)

SSH_KEY_LIST = list_shape(
    "account-ssh-key-list",
    [
        ("id", "ID"),
        ("name", "Name"),
        ("fingerprint", "Fingerprint"),
        ("created_at", "Created"),
    ],
    empty="No SSH keys found.",
)

SSH_KEY_DETAIL = detail_shape(
    "account-ssh-key-detail",
    [
        ("id", "ID"),
        ("name", "Name"),
        ("fingerprint", "Fingerprint"),
        ("public_key_preview", "Public Key Preview"),
        ("is_account_default", "Account Default", formatters.yes_no),
        ("created_at", "Created"),
    ],
)

API_KEY_LIST = list_shape(
    "api-key-list",
    [
        ("id", "ID"),
        ("name", "Name"),
        ("abilities", "Abilities", formatters.joined),
        ("last_used_at", "Last Used"),
        ("expires_at", "Expires"),
    ],
    empty="No API keys found.",
)

API_KEY_CREATED = detail_shape(
    "api-key-created",
    [
        ("name", "Name"),
        ("token", "Token"),
        ("abilities", "Abilities", formatters.joined),
        ("expires_at", "Expires"),
    ],
    hints=("Save this token - it won't be shown again!",),
)

DESCRIPTORS = (
    EndpointDescriptor(
        ("account",), "show", "GET", "/account",
        shape=ACCOUNT_SUMMARY,
        help="Show account summary",
    ),
    EndpointDescriptor(
        ("account", "ssh-key"), "list", "GET", "/ssh-keys",
        shape=SSH_KEY_LIST,
        fields=PAGINATION,
        help="List account SSH keys",
    ),
    EndpointDescriptor(
        ("account", "ssh-key"), "show", "GET", "/ssh-keys/{key_id}",
        params=("key_id",),
        shape=SSH_KEY_DETAIL,
        help="Show an account SSH key",
    ),
    EndpointDescriptor(
        ("account", "ssh-key"), "create", "POST", "/ssh-keys",
        shape=message_shape("account-ssh-key-created", "SSH key created: {name} ({id})"),
        fields=(
            body("name", required=True, help="Key name"),
            body("public_key", required=True, help="Public key contents"),
        ),
        help="Create an account SSH key",
    ),
    EndpointDescriptor(
        ("account", "ssh-key"), "delete", "DELETE", "/ssh-keys/{key_id}",
        params=("key_id",),
        shape=message_shape("account-ssh-key-deleted", "SSH key deleted successfully."),
        help="Delete an account SSH key",
    ),
    EndpointDescriptor(
        ("account", "api-key"), "list", "GET", "/api-keys",
        shape=API_KEY_LIST,
        fields=PAGINATION,
        help="List API keys",
    ),
    EndpointDescriptor(
        ("account", "api-key"), "create", "POST", "/api-keys",
        shape=API_KEY_CREATED,
        fields=(
            body("name", required=True, help="Key name"),
            body("abilities", FieldType.LIST, help="Abilities granted to the key"),
            body("expires_at", FieldType.DATE, help="Expiry date (ISO 8601)"),
        ),
        help="Create an API key",
    ),
    EndpointDescriptor(
        ("account", "api-key"), "delete", "DELETE", "/api-keys/{token_id}",
        params=("token_id",),
        shape=message_shape("api-key-deleted", "API key deleted successfully."),
        help="Delete an API key",
    ),
    EndpointDescriptor(
        ("account", "secret"), "list", "GET", "/global-secrets",
        shape=SECRET_LIST,
        fields=PAGINATION,
        help="List global secrets",
    ),
    EndpointDescriptor(
        ("account", "secret"), "show", "GET", "/global-secrets/{secret_id}",
        params=("secret_id",),
        shape=SECRET_DETAIL,
        help="Show a global secret",
    ),
    EndpointDescriptor(
        ("account", "secret"), "create", "POST", "/global-secrets",
        shape=message_shape("global-secret-created", "Secret created: {key} ({id})"),
        fields=secret_fields(required=True),
        help="Create a global secret",
    ),
    EndpointDescriptor(
        ("account", "secret"), "update", "PUT", "/global-secrets/{secret_id}",
        params=("secret_id",),
        shape=message_shape("global-secret-updated", "Secret updated successfully."),
        fields=secret_fields(required=False),
        help="Update a global secret",
    ),
    EndpointDescriptor(
        ("account", "secret"), "delete", "DELETE", "/global-secrets/{secret_id}",
        params=("secret_id",),
        shape=message_shape("global-secret-deleted", "Secret deleted successfully."),
        help="Delete a global secret",
    ),
)
