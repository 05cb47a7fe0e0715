"""Command catalogue: every resource command as declarative endpoint data."""

from __future__ import annotations

from vector_cli.commands import account, auth, db, deploy, env, site, waf, webhook
from vector_cli.registry import EndpointRegistry

HELP = {
    "site": "Manage sites",
    "site ssh-key": "Manage site SSH keys",
    "env": "Manage environments",
    "env secret": "Manage environment secrets",
    "env db": "Manage environment databases",
    "env db import-session": "Large database imports via upload URL",
    "deploy": "Manage deployments",
    "ssl": "Manage SSL certificates",
    "db": "Database import and export",
    "db import-session": "Large database imports via upload URL",
    "db export": "Database exports",
    "waf": "Web application firewall",
    "waf rate-limit": "Rate limit rules",
    "waf blocked-ip": "Blocked IP addresses",
    "waf blocked-referrer": "Blocked referrers",
    "waf allowed-referrer": "Allowed referrers",
    "account": "Account details and credentials",
    "account ssh-key": "Account SSH keys",
    "account api-key": "API keys",
    "account secret": "Global secrets",
    "event": "Account event log",
    "webhook": "Manage webhooks",
    "php": "PHP runtime information",
}

MODULES = (auth, site, env, deploy, db, waf, account, webhook)


def build_registry() -> EndpointRegistry:
    """Collect and validate every descriptor; a malformed entry raises RegistryError."""
    return EndpointRegistry(
        descriptor for module in MODULES for descriptor in module.DESCRIPTORS
    )
