"""Deployment and SSL commands."""

from __future__ import annotations

from vector_cli.registry import (
    PAGINATION,
    Column,
    EndpointDescriptor,
    FieldType,
    body,
    detail_shape,
    list_shape,
    message_shape,
)
from vector_cli.services import formatters

DEPLOY_LIST = list_shape(
    "deploy-list",
    [
        ("id", "ID"),
        ("status", "Status"),
        ("actor", "Actor"),
        ("created_at", "Created"),
    ],
    empty="No deployments found.",
)

DEPLOY_DETAIL = detail_shape(
    "deploy-detail",
    [
        ("id", "ID"),
        ("status", "Status"),
        ("actor", "Actor"),
        ("created_at", "Created"),
        ("updated_at", "Updated"),
    ],
    sections=(Column("stdout", "stdout"), Column("stderr", "stderr")),
)

SSL_STATUS = detail_shape(
    "ssl-status",
    [
        ("status", "Status"),
        ("provisioning_step", "Provisioning Step"),
        ("failure_reason", "Failure Reason"),
        ("is_production", "Production", formatters.yes_no),
        ("custom_domain", "Custom Domain"),
        ("fqdn", "FQDN"),
    ],
)

DESCRIPTORS = (
    EndpointDescriptor(
        ("deploy",), "list", "GET", "/environments/{env_id}/deployments",
        params=("env_id",),
        shape=DEPLOY_LIST,
        fields=PAGINATION,
        help="List deployments for an environment",
    ),
    EndpointDescriptor(
        ("deploy",), "show", "GET", "/deployments/{deploy_id}",
        params=("deploy_id",),
        shape=DEPLOY_DETAIL,
        help="Show deployment details and output",
    ),
    EndpointDescriptor(
        ("deploy",), "trigger", "POST", "/environments/{env_id}/deployments",
        params=("env_id",),
        shape=message_shape("deploy-triggered", "Deployment initiated: {id} ({status})"),
        fields=(
            body("include_uploads", FieldType.BOOLEAN, help="Include the uploads directory"),
            body("include_database", FieldType.BOOLEAN, help="Include the database"),
        ),
        help="Trigger a deployment",
    ),
    EndpointDescriptor(
        ("deploy",), "rollback", "POST", "/environments/{env_id}/rollback",
        params=("env_id",),
        shape=message_shape("deploy-rollback", "Rollback initiated: {id} ({status})"),
        fields=(
            body("target_deployment_id", flag="target",
                 help="Deployment to roll back to (defaults to the previous one)"),
        ),
        help="Roll back to a previous deployment",
    ),
    EndpointDescriptor(
        ("ssl",), "status", "GET", "/environments/{env_id}/ssl",
        params=("env_id",),
        shape=SSL_STATUS,
        help="Check SSL status",
    ),
    EndpointDescriptor(
        ("ssl",), "nudge", "POST", "/environments/{env_id}/ssl/nudge",
        params=("env_id",),
        shape=message_shape(
            "ssl-nudged", "SSL provisioning nudge sent.", message_field="message"
        ),
        fields=(body("retry", FieldType.BOOLEAN, help="Retry a failed provisioning"),),
        help="Nudge SSL provisioning",
    ),
)
