"""
Config -> Kernel Bridges.

Wires a ``StockConfig`` into kernel components.  This lives in
stock_config (the producer) because the kernel must NEVER import
stock_config.

Usage:
    from stock_config import get_active_config
    from stock_config.bridges import build_kernel

    kernel = build_kernel(get_active_config(), snapshot=load_seed(path))
    kernel.movements.register_entry(item_id, 10, supplier="ACME")
"""

from __future__ import annotations

from dataclasses import dataclass

from stock_config.schema import StockConfig
from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.domain.ids import IdGenerator, UuidGenerator
from stock_kernel.domain.snapshot import StoreSnapshot
from stock_kernel.selectors import AuditSelector, DirectorySelector, ItemSelector
from stock_kernel.services import (
    AuditRecorder,
    BackupSerializer,
    DirectoryManager,
    MovementProcessor,
    PanelController,
)
from stock_kernel.store import EntityStore


@dataclass(frozen=True)
class StockKernel:
    """One store and every component bound to it."""

    config: StockConfig
    store: EntityStore
    audit: AuditRecorder
    movements: MovementProcessor
    directory: DirectoryManager
    panel: PanelController
    backup: BackupSerializer
    items: ItemSelector
    people: DirectorySelector
    audit_log: AuditSelector


def build_kernel(
    config: StockConfig,
    snapshot: StoreSnapshot | None = None,
    clock: Clock | None = None,
    id_generator: IdGenerator | None = None,
) -> StockKernel:
    """Build a ``StockKernel`` over a fresh store seeded with ``snapshot``."""
    clock = clock or SystemClock()
    ids = id_generator or UuidGenerator()
    store = EntityStore(snapshot)
    audit = AuditRecorder(store, clock=clock, id_generator=ids)
    directory = DirectoryManager(
        store,
        audit,
        id_generator=ids,
        actor_name=config.default_actor,
        avatar_url_template=config.avatar_url_template,
        min_password_length=config.min_password_length,
    )
    return StockKernel(
        config=config,
        store=store,
        audit=audit,
        movements=MovementProcessor(
            store, audit, clock=clock, id_generator=ids, actor_name=config.default_actor
        ),
        directory=directory,
        panel=PanelController(directory),
        backup=BackupSerializer(
            store,
            audit,
            clock=clock,
            actor_name=config.default_actor,
            filename_prefix=config.backup_filename_prefix,
        ),
        items=ItemSelector(store, search_limit=config.search_result_limit),
        people=DirectorySelector(store),
        audit_log=AuditSelector(store),
    )
