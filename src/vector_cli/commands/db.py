"""Database import and export commands.

Imports exist at two scopes, a site's development database (``db``) and an
environment's database (``env db``); both share the same request and
response layout, so the descriptors are generated by :func:`import_commands`.
"""

from __future__ import annotations

from vector_cli.registry import (
    EndpointDescriptor,
    FieldSpec,
    FieldType,
    body,
    detail_shape,
    message_shape,
    query,
    upload,
)

MAX_DIRECT_IMPORT_BYTES = 50 * 1024 * 1024

TOO_LARGE = "File too large for direct import. Use 'import-session' for files over 50MB."

IMPORTED = message_shape(
    "db-imported",
    "Database imported successfully ({duration_ms}ms).",
    success_field="success",
)

IMPORT_SESSION_STATUS = detail_shape(
    "db-import-session",
    [
        ("id", "Import ID"),
        ("status", "Status"),
        ("filename", "Filename"),
        ("duration_ms", "Duration (ms)"),
        ("error_message", "Error"),
        ("created_at", "Created"),
        ("completed_at", "Completed"),
    ],
)

EXPORT_STATUS = detail_shape(
    "db-export",
    [
        ("id", "Export ID"),
        ("status", "Status"),
        ("format", "Format"),
        ("size_bytes", "Size (bytes)"),
        ("duration_ms", "Duration (ms)"),
        ("error_message", "Error"),
        ("download_url", "Download URL"),
        ("download_expires_at", "Download Expires"),
        ("created_at", "Created"),
        ("completed_at", "Completed"),
    ],
)


def _direct_import_fields() -> tuple[FieldSpec, ...]:
    return (
        upload("file", required=True, max_bytes=MAX_DIRECT_IMPORT_BYTES, too_large=TOO_LARGE,
               help="SQL file to import (max 50MB)"),
        query("drop_tables", FieldType.BOOLEAN, help="Drop existing tables first"),
        query("disable_foreign_keys", FieldType.BOOLEAN, help="Disable foreign key checks"),
        query("search_replace_from", requires=("search_replace_to",), help="Search string"),
        query("search_replace_to", requires=("search_replace_from",), help="Replacement string"),
    )


def _session_fields() -> tuple[FieldSpec, ...]:
    return (
        body("filename", help="Name of the file to upload"),
        body("content_length", FieldType.INTEGER, help="Size of the file in bytes"),
        body("drop_tables", FieldType.BOOLEAN, body_path="options.drop_tables",
             help="Drop existing tables first"),
        body("disable_foreign_keys", FieldType.BOOLEAN, body_path="options.disable_foreign_keys",
             help="Disable foreign key checks"),
        body("search_replace_from", body_path="options.search_replace.from",
             requires=("search_replace_to",), help="Search string"),
        body("search_replace_to", body_path="options.search_replace.to",
             requires=("search_replace_from",), help="Replacement string"),
    )


def import_commands(
    noun: tuple[str, ...], scope: str, param: str, command: str
) -> tuple[EndpointDescriptor, ...]:
    """Direct import plus the import-session workflow under *scope*."""
    session = (*noun, "import-session")
    created = detail_shape(
        f"{command.replace(' ', '-')}-import-session-created",
        [
            ("id", "Import ID"),
            ("status", "Status"),
            ("upload_url", "Upload URL"),
            ("upload_expires_at", "Expires"),
        ],
        hints=(
            "Upload your SQL file to the URL above, then run:",
            f"  vector {command} import-session run {{{param}}} {{id}}",
        ),
    )
    return (
        EndpointDescriptor(
            noun, "import", "POST", f"{scope}/db/import",
            params=(param,),
            shape=IMPORTED,
            fields=_direct_import_fields(),
            help="Import a SQL file directly (up to 50MB)",
        ),
        EndpointDescriptor(
            session, "create", "POST", f"{scope}/db/imports",
            params=(param,),
            shape=created,
            fields=_session_fields(),
            help="Create an import session for large files",
        ),
        EndpointDescriptor(
            session, "run", "POST", f"{scope}/db/imports/{{import_id}}/run",
            params=(param, "import_id"),
            shape=message_shape(
                f"{command.replace(' ', '-')}-import-started", "Import started: {import_id} ({status})"
            ),
            help="Run an uploaded import",
        ),
        EndpointDescriptor(
            session, "status", "GET", f"{scope}/db/imports/{{import_id}}",
            params=(param, "import_id"),
            shape=IMPORT_SESSION_STATUS,
            help="Check import status",
        ),
    )


DESCRIPTORS = (
    *import_commands(("db",), "/sites/{site_id}", "site_id", "db"),
    EndpointDescriptor(
        ("db", "export"), "create", "POST", "/sites/{site_id}/db/export",
        params=("site_id",),
        shape=message_shape(
            "db-export-started",
            "Export started: {id} ({status})",
            hints=("Check status with:", "  vector db export status {site_id} {id}"),
        ),
        fields=(body("format", FieldType.ENUM, choices=("sql", "sql.gz"), help="Export format"),),
        help="Start a database export",
    ),
    EndpointDescriptor(
        ("db", "export"), "status", "GET", "/sites/{site_id}/db/exports/{export_id}",
        params=("site_id", "export_id"),
        shape=EXPORT_STATUS,
        help="Check export status",
    ),
)
