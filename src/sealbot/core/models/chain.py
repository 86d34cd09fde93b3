"""On-chain call and receipt models."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

SUCCESS_STATUS = "success"


@dataclass(frozen=True)
class MoveCall:
    """A Move function call to be built into a transaction."""

    package_id: str
    module: str
    function: str
    arguments: tuple[Any, ...] = ()
    type_arguments: tuple[str, ...] = ()
    gas_budget: int | None = None

    @property
    def target(self) -> str:
        """Fully qualified ``package::module::function`` target."""
        return f"{self.package_id}::{self.module}::{self.function}"

    def with_gas_budget(self, gas_budget: int) -> MoveCall:
        """Return a copy carrying the given gas budget."""
        return replace(self, gas_budget=gas_budget)


@dataclass(frozen=True)
class ObjectChange:
    """An object created or mutated by a transaction."""

    change_type: str
    object_id: str
    object_type: str | None = None
    owner: Any = None

    @property
    def owner_address(self) -> str | None:
        """Owning address for address-owned objects."""
        if isinstance(self.owner, dict):
            return self.owner.get("AddressOwner")
        return None

    @property
    def is_shared(self) -> bool:
        """Check if the object has shared ownership."""
        return isinstance(self.owner, dict) and "Shared" in self.owner

    @classmethod
    def from_rpc(cls, data: dict[str, Any]) -> ObjectChange:
        """Build from a JSON-RPC ``objectChanges`` entry."""
        return cls(
            change_type=data.get("type", ""),
            object_id=data.get("objectId", ""),
            object_type=data.get("objectType"),
            owner=data.get("owner"),
        )


@dataclass(frozen=True)
class TransactionReceipt:
    """Result of a confirmed transaction."""

    digest: str
    status: str | None
    error: str | None = None
    object_changes: tuple[ObjectChange, ...] = field(default_factory=tuple)

    @property
    def succeeded(self) -> bool:
        """Only an explicit success status counts as success."""
        return self.status == SUCCESS_STATUS

    @property
    def short_digest(self) -> str:
        """Digest shortened for display."""
        return shorten(self.digest)

    @property
    def created(self) -> list[ObjectChange]:
        """Objects created by the transaction."""
        return [c for c in self.object_changes if c.change_type == "created"]

    @property
    def mutated(self) -> list[ObjectChange]:
        """Objects mutated by the transaction."""
        return [c for c in self.object_changes if c.change_type == "mutated"]

    @classmethod
    def from_rpc(cls, data: dict[str, Any]) -> TransactionReceipt:
        """Build from a ``sui_executeTransactionBlock`` result."""
        status = (data.get("effects") or {}).get("status") or {}
        return cls(
            digest=data.get("digest", ""),
            status=status.get("status"),
            error=status.get("error"),
            object_changes=tuple(
                ObjectChange.from_rpc(change) for change in data.get("objectChanges") or []
            ),
        )


def shorten(value: str, length: int = 10) -> str:
    """Shorten an identifier for display."""
    if len(value) <= length:
        return value
    return f"{value[:length]}..."
