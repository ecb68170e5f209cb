from abc import ABC, abstractmethod
from typing import Any, Optional


class ResultCache(ABC):
    """Key/value store with per-entry expiry.

    Values are JSON-compatible dicts so every backend can hold them.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[dict[str, Any]]:
        ...

    @abstractmethod
    async def set(self, key: str, value: dict[str, Any], ttl: int) -> None:
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...

    async def close(self) -> None:
        return None


class NullCache(ResultCache):
    """Never stores anything."""

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        return None

    async def set(self, key: str, value: dict[str, Any], ttl: int) -> None:
        return None

    async def delete(self, key: str) -> None:
        return None
