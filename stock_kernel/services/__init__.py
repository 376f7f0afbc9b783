"""Services for the stock kernel (write side)."""

from stock_kernel.services.audit_recorder import AuditRecorder
from stock_kernel.services.backup_serializer import BackupSerializer
from stock_kernel.services.directory_manager import DirectoryManager
from stock_kernel.services.movement_processor import MovementProcessor
from stock_kernel.services.panel_controller import PanelController

__all__ = [
    "AuditRecorder",
    "BackupSerializer",
    "DirectoryManager",
    "MovementProcessor",
    "PanelController",
]
