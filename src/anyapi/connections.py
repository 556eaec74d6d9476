"""Workspace to broker connection id mapping."""

DEFAULT_WORKSPACE_ID = "1"


def connection_id_for(workspace_id: str | None = None) -> str:
    """Return the broker connection id for a workspace.

    The same id is reused for every provider connected to the workspace; the
    provider config key disambiguates at the broker.
    """
    workspace = str(workspace_id).strip() if workspace_id is not None else ""
    return f"workspace_{workspace or DEFAULT_WORKSPACE_ID}"
