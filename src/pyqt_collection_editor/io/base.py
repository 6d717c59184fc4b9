"""Protocols for durable storage media."""

from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """Protocol for string-keyed storage backends holding JSON text."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


def project_key(base_key: str, project_id: Optional[str] = None) -> str:
    """Namespace a storage key by project; the default project uses the bare key."""
    if not project_id or project_id == "default":
        return base_key
    return f"{base_key}-{project_id}"
