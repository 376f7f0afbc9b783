"""Selectors for the stock kernel (read side)."""

from stock_kernel.selectors.audit_selector import AuditSelector
from stock_kernel.selectors.base import BaseSelector
from stock_kernel.selectors.directory_selector import DirectorySelector
from stock_kernel.selectors.item_selector import ItemSelector

__all__ = [
    "AuditSelector",
    "BaseSelector",
    "DirectorySelector",
    "ItemSelector",
]
