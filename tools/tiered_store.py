"""
Tiered Store — an ordered list of document stores.
Reads try each tier in order until one yields an acceptable document.
Writes go to every tier: required tiers raise, optional tiers are best-effort.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from tools.errors import StorageError


class DocumentStore(Protocol):
    name: str

    def read(self, key: str) -> Optional[str]: ...

    def write(self, key: str, content: str) -> None: ...


@dataclass
class Tier:
    store: DocumentStore
    required: bool = False


class TieredStore:
    def __init__(self, tiers: list[Tier]):
        self.tiers = tiers

    def read_json(
        self,
        key: str,
        accept: Callable[[Any], bool] = None,
    ) -> tuple[Any, Optional[str]]:
        """
        Read and parse `key` from the first tier that has a usable copy.

        Args:
            key: Document name.
            accept: Optional predicate; documents it rejects fall through to the next tier.

        Returns:
            (data, tier name), or (None, None) if no tier had an acceptable document.
        """
        for tier in self.tiers:
            name = tier.store.name
            try:
                raw = tier.store.read(key)
            except StorageError as e:
                print(f"[Store] ⚠️  Failed to read {key} from {name}, trying next: {e}")
                continue

            if raw is None or not raw.strip():
                continue

            try:
                data = json.loads(raw)
            except json.JSONDecodeError as e:
                print(f"[Store] ⚠️  {key} from {name} is not valid JSON: {e}")
                continue

            if accept is not None and not accept(data):
                continue

            return data, name

        return None, None

    def write_json(self, key: str, data: Any) -> list[str]:
        """
        Serialize `data` and write it to every tier.

        Required tiers are written first and their errors propagate.
        Optional tier failures are printed and ignored.

        Returns:
            Names of the tiers that were written.
        """
        payload = json.dumps(data, indent=2, default=str)
        written = []

        for tier in sorted(self.tiers, key=lambda t: not t.required):
            name = tier.store.name
            if tier.required:
                tier.store.write(key, payload)
                written.append(name)
                continue

            try:
                tier.store.write(key, payload)
                written.append(name)
            except StorageError as e:
                print(f"[Store] ⚠️  Failed to save {key} to {name} (non-fatal): {e}")

        return written
