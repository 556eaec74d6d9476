"""Process-lifetime capability cache."""

from anyapi.capabilities.types import Capabilities


class CapabilityCache:
    """Discovered capabilities keyed by "<provider>_<workspace_id>".

    Entries are never invalidated or refreshed. Each entry is replaced as a
    whole record, so concurrent discoveries of the same key simply race to
    the last write.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Capabilities] = {}

    @staticmethod
    def key(provider: str, workspace_id: str) -> str:
        return f"{provider}_{workspace_id}"

    def get(self, provider: str, workspace_id: str) -> Capabilities | None:
        return self._entries.get(self.key(provider, workspace_id))

    def set(self, provider: str, workspace_id: str, capabilities: Capabilities) -> None:
        self._entries[self.key(provider, workspace_id)] = capabilities

    @property
    def keys(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries
