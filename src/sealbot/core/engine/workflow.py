"""Multi-step Seal workflows built from transactions and one blob upload."""

from __future__ import annotations

import random
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

from sealbot.core.engine.names import generate_name
from sealbot.core.errors import ObjectIdResolutionFailed
from sealbot.core.models.chain import MoveCall, shorten
from sealbot.core.models.config import DEFAULT_IMAGE_URL, DEFAULT_SEAL_PACKAGE_ID
from sealbot.core.models.workflow import (
    AllowlistResult,
    SubscriptionResult,
    WorkflowKind,
    WorkflowResult,
)
from sealbot.core.storage.uploader import DEFAULT_EPOCHS

if TYPE_CHECKING:
    from sealbot.core.chain.executor import TransactionExecutor
    from sealbot.core.events.bus import EventBus
    from sealbot.core.models.chain import TransactionReceipt
    from sealbot.core.storage.content import ContentResolver, ContentSource
    from sealbot.core.storage.uploader import BlobUploadManager
    from sealbot.core.wallet.keys import SigningIdentity

logger = structlog.get_logger(__name__)

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{1,64}$")


@dataclass
class WorkflowSettings:
    """Parameters shared by every workflow repetition."""

    package_id: str = DEFAULT_SEAL_PACKAGE_ID
    content_source: ContentSource = DEFAULT_IMAGE_URL
    epochs: int = DEFAULT_EPOCHS
    additional_addresses: Sequence[Any] = field(default_factory=list)
    subscription_amount: int = 10
    subscription_duration: int = 60_000_000


def resolve_created_ids(
    receipt: TransactionReceipt,
    owner: str,
    label: str,
) -> tuple[str, str]:
    """
    Find the objects created by a creation transaction.

    Returns:
        ``(owned_id, shared_id)``: the object owned by ``owner`` (the
        capability/entry) and the shared object

    Raises:
        ObjectIdResolutionFailed: If either object is missing
    """
    created = receipt.created
    owned = next((c for c in created if c.owner_address == owner and c.object_id), None)
    shared = next((c for c in created if c.is_shared and c.object_id), None)

    missing = []
    if owned is None:
        missing.append("owned entry object")
    if shared is None:
        missing.append("shared object")
    if missing:
        raise ObjectIdResolutionFailed(label, missing)
    return owned.object_id, shared.object_id


class WorkflowEngine:
    """
    Runs the allowlist and subscription workflows for one signing identity.

    Any failing step aborts the rest of the run and propagates; a result is
    only produced once every step has succeeded.
    """

    def __init__(
        self,
        executor: TransactionExecutor,
        uploader: BlobUploadManager,
        resolver: ContentResolver,
        events: EventBus,
        settings: WorkflowSettings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._executor = executor
        self._uploader = uploader
        self._resolver = resolver
        self._events = events
        self.settings = settings or WorkflowSettings()
        self._rng = rng

    async def run(self, kind: WorkflowKind, identity: SigningIdentity) -> WorkflowResult:
        """Run the workflow of the given kind."""
        if kind == WorkflowKind.ALLOWLIST:
            return await self.run_allowlist(identity)
        if kind == WorkflowKind.SUBSCRIPTION:
            return await self.run_subscription(identity)
        raise ValueError(f"Unknown workflow kind: {kind}")

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------

    async def run_allowlist(self, identity: SigningIdentity) -> AllowlistResult:
        """Create an allowlist, add addresses, upload content and publish it."""
        self._events.info("--- Starting Complete Allowlist Workflow ---")
        try:
            allowlist_id, entry_id = await self.create_allowlist_entry(identity)
            await self.add_address(identity, allowlist_id, entry_id, identity.address)

            for address in self.settings.additional_addresses:
                if not isinstance(address, str) or not ADDRESS_PATTERN.match(address):
                    self._events.warn(f"Skipping invalid additional address: {address!r}")
                    continue
                await self.add_address(identity, allowlist_id, entry_id, address)

            blob_id = await self.upload_content()
            await self.publish_to_allowlist(identity, allowlist_id, entry_id, blob_id)
        except Exception as e:
            self._events.error("--- Complete Allowlist Workflow Failed ---", e)
            raise

        result = AllowlistResult(
            allowlist_id=allowlist_id,
            entry_object_id=entry_id,
            blob_id=blob_id,
        )
        self._events.success("--- Complete Allowlist Workflow Successful ---", **result.to_dict())
        return result

    async def run_subscription(self, identity: SigningIdentity) -> SubscriptionResult:
        """Create a service subscription, upload content and publish it."""
        self._events.info("--- Starting Complete Subscription Workflow ---")
        try:
            shared_id, entry_id = await self.create_service_entry(identity)
            blob_id = await self.upload_content()
            await self.publish_to_subscription(identity, shared_id, entry_id, blob_id)
        except Exception as e:
            self._events.error("--- Complete Subscription Workflow Failed ---", e)
            raise

        result = SubscriptionResult(
            shared_object_id=shared_id,
            service_entry_id=entry_id,
            blob_id=blob_id,
        )
        self._events.success("--- Complete Subscription Workflow Successful ---", **result.to_dict())
        return result

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def create_allowlist_entry(
        self,
        identity: SigningIdentity,
        name: str | None = None,
    ) -> tuple[str, str]:
        """
        Create an allowlist entry.

        Returns:
            ``(allowlist_id, entry_object_id)``
        """
        name = name or generate_name("allowlist", self._rng)
        self._events.info(f"Creating allowlist entry: {name}")
        label = f"Create Allowlist Entry ({name})"
        receipt = await self._executor.execute(
            identity,
            self._call("allowlist", "create_allowlist_entry", name),
            label,
        )
        entry_id, allowlist_id = resolve_created_ids(receipt, identity.address, label)
        self._events.success(
            f"Allowlist entry created: Name={name}, AllowlistID={shorten(allowlist_id)}, "
            f"EntryID={shorten(entry_id)}"
        )
        return allowlist_id, entry_id

    async def add_address(
        self,
        identity: SigningIdentity,
        allowlist_id: str,
        entry_id: str,
        address: str,
    ) -> None:
        """Add an address to an allowlist."""
        short = address[:6]
        self._events.info(f"Adding address {short}... to allowlist {allowlist_id[:6]}...")
        await self._executor.execute(
            identity,
            self._call("allowlist", "add", allowlist_id, entry_id, address),
            f"Add Address to Allowlist ({short}...)",
        )
        self._events.success(f"Successfully added {short}... to allowlist.")

    async def create_service_entry(
        self,
        identity: SigningIdentity,
        name: str | None = None,
    ) -> tuple[str, str]:
        """
        Create a service subscription entry.

        Returns:
            ``(shared_object_id, service_entry_id)``
        """
        name = name or generate_name("service", self._rng)
        amount = self.settings.subscription_amount
        duration = self.settings.subscription_duration
        self._events.info(
            f"Creating service subscription entry: {name} (Amount: {amount}, Duration: {duration})"
        )
        label = f"Create Service Entry ({name})"
        receipt = await self._executor.execute(
            identity,
            self._call("subscription", "create_service_entry", str(amount), str(duration), name),
            label,
        )
        entry_id, shared_id = resolve_created_ids(receipt, identity.address, label)
        self._events.success(
            f"Service entry created: Name={name}, SharedID={shorten(shared_id)}, "
            f"EntryID={shorten(entry_id)}"
        )
        return shared_id, entry_id

    async def upload_content(self) -> str:
        """Resolve the configured content source and upload it."""
        content = await self._resolver.resolve(self.settings.content_source)
        return await self._uploader.upload(content, self.settings.epochs)

    async def publish_to_allowlist(
        self,
        identity: SigningIdentity,
        allowlist_id: str,
        entry_id: str,
        blob_id: str,
    ) -> None:
        """Publish a blob reference to an allowlist."""
        await self._publish(identity, "allowlist", allowlist_id, entry_id, blob_id)

    async def publish_to_subscription(
        self,
        identity: SigningIdentity,
        shared_id: str,
        entry_id: str,
        blob_id: str,
    ) -> None:
        """Publish a blob reference to a service subscription."""
        await self._publish(identity, "subscription", shared_id, entry_id, blob_id)

    async def _publish(
        self,
        identity: SigningIdentity,
        module: str,
        shared_id: str,
        entry_id: str,
        blob_id: str,
    ) -> None:
        short_blob = blob_id[:6]
        self._events.info(f"Publishing blob {short_blob}... to {module} {shared_id[:6]}...")
        await self._executor.execute(
            identity,
            self._call(module, "publish", shared_id, entry_id, blob_id),
            f"Publish Blob to {module.capitalize()} ({short_blob}...)",
        )
        self._events.success(f"Successfully published blob {short_blob}... to {module}.")

    def _call(self, module: str, function: str, *arguments: Any) -> MoveCall:
        return MoveCall(
            package_id=self.settings.package_id,
            module=module,
            function=function,
            arguments=arguments,
        )
