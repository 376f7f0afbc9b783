"""
Typed Exception Hierarchy for the Stock Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Every failure the kernel can report is recoverable and is surfaced straight
to the caller (the view layer) which decides how to present it: inline form
message, dialog, toast. Callers must be able to branch on the failure kind
without parsing message text, so:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, UI-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example - WRONG way to handle errors:
    try:
        processor.register_exit(item_id, 5, "Ana", "Carlos")
    except Exception as e:
        if "stock" in str(e):  # FRAGILE - message might change
            show_stock_warning()

Example - RIGHT way (what this module enables):
    try:
        processor.register_exit(item_id, 5, "Ana", "Carlos")
    except InsufficientStockError as e:
        form.error("quantity", f"Only {e.available} left of {e.item_code}")

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from StockKernelError:

    StockKernelError (base)
    |
    +-- MovementError
    |   +-- ItemNotFoundError
    |   +-- InvalidQuantityError
    |   +-- InsufficientStockError
    |
    +-- DirectoryError
    |   +-- DuplicateEmailError
    |   +-- UserNotFoundError
    |   +-- SupplierNotFoundError
    |   +-- PasswordMismatchError
    |   +-- PasswordTooShortError
    |
    +-- BackupError
    |   +-- InvalidBackupFormatError
    |
    +-- PanelError
        +-- PanelStateError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                   | When Raised
----------------|------------------------|-----------------------------------------
Movement        | ITEM_NOT_FOUND         | Item id does not resolve
                | INVALID_QUANTITY       | Quantity is not a positive integer
                | INSUFFICIENT_STOCK     | Exit would drive stock negative
----------------|------------------------|-----------------------------------------
Directory       | DUPLICATE_EMAIL        | New user email already in use (any case)
                | USER_NOT_FOUND         | Update of an unknown user id
                | SUPPLIER_NOT_FOUND     | Update of an unknown supplier id
                | PASSWORD_MISMATCH      | New and confirmation passwords differ
                | PASSWORD_TOO_SHORT     | New password under the minimum length
----------------|------------------------|-----------------------------------------
Backup          | INVALID_BACKUP_FORMAT  | Undecodable, incomplete or malformed doc
----------------|------------------------|-----------------------------------------
Panel           | PANEL_STATE_ERROR      | Illegal panel transition or draft field

===============================================================================
HANDLING PATTERNS
===============================================================================

1. CATCH SPECIFIC EXCEPTIONS (not base classes):

    try:
        directory.add_user(name, email, profile)
    except DuplicateEmailError as e:
        form.error("email", f"{e.email} is already in use")

2. USE STRUCTURED DATA (not message parsing):

    except InvalidBackupFormatError as e:
        return {"error": e.code, "missing": list(e.missing_keys)}

3. NOTHING TO ROLL BACK:

    A raised kernel error guarantees the store is exactly as it was before
    the call. Callers never need compensating writes.

===============================================================================
"""


class StockKernelError(Exception):
    """
    Base exception for all stock kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "STOCK_KERNEL_ERROR"


# Movement-related exceptions


class MovementError(StockKernelError):
    """Base exception for stock entry/exit errors."""

    code: str = "MOVEMENT_ERROR"


class ItemNotFoundError(MovementError):
    """Stock item with given ID was not found."""

    code: str = "ITEM_NOT_FOUND"

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Stock item not found: {item_id}")


class InvalidQuantityError(MovementError):
    """Movement quantity is not a positive integer."""

    code: str = "INVALID_QUANTITY"

    def __init__(self, quantity: object):
        self.quantity = quantity
        super().__init__(f"Quantity must be a positive integer, got {quantity!r}")


class InsufficientStockError(MovementError):
    """Exit quantity exceeds the item's current system stock."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, item_id: str, item_code: str, requested: int, available: int):
        self.item_id = item_id
        self.item_code = item_code
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {item_code}: "
            f"requested {requested}, available {available}"
        )


# Directory-related exceptions


class DirectoryError(StockKernelError):
    """Base exception for user and supplier management errors."""

    code: str = "DIRECTORY_ERROR"


class DuplicateEmailError(DirectoryError):
    """A user with the same email (case-insensitive) already exists."""

    code: str = "DUPLICATE_EMAIL"

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email already in use: {email}")


class UserNotFoundError(DirectoryError):
    """User with given ID was not found."""

    code: str = "USER_NOT_FOUND"

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class SupplierNotFoundError(DirectoryError):
    """Supplier with given ID was not found."""

    code: str = "SUPPLIER_NOT_FOUND"

    def __init__(self, supplier_id: str):
        self.supplier_id = supplier_id
        super().__init__(f"Supplier not found: {supplier_id}")


class PasswordMismatchError(DirectoryError):
    """New password and its confirmation differ."""

    code: str = "PASSWORD_MISMATCH"

    def __init__(self):
        super().__init__("Passwords do not match")


class PasswordTooShortError(DirectoryError):
    """New password is shorter than the configured minimum."""

    code: str = "PASSWORD_TOO_SHORT"

    def __init__(self, length: int, min_length: int):
        self.length = length
        self.min_length = min_length
        super().__init__(
            f"Password must have at least {min_length} characters (got {length})"
        )


# Backup-related exceptions


class BackupError(StockKernelError):
    """Base exception for backup export/restore errors."""

    code: str = "BACKUP_ERROR"


class InvalidBackupFormatError(BackupError):
    """
    Backup document cannot be restored.

    Raised for undecodable JSON, a document that is not an object, missing
    top-level collections, or records that do not parse. The store is left
    untouched.
    """

    code: str = "INVALID_BACKUP_FORMAT"

    def __init__(self, reason: str, missing_keys: tuple[str, ...] = ()):
        self.reason = reason
        self.missing_keys = missing_keys
        super().__init__(f"Invalid backup document: {reason}")


# Panel-related exceptions


class PanelError(StockKernelError):
    """Base exception for slide-over panel errors."""

    code: str = "PANEL_ERROR"


class PanelStateError(PanelError):
    """Requested panel transition is not valid in the current state."""

    code: str = "PANEL_STATE_ERROR"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid panel operation: {reason}")
