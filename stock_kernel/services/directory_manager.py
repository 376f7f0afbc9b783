"""
DirectoryManager -- create/update/delete for users and suppliers.

Responsibility:
    Owns the user and supplier collections' write path: email uniqueness on
    user creation, id generation, default avatar, and the audit line for
    every change.  Also validates password changes.

Architecture position:
    Kernel > Services.  Driven directly by callers or through
    ``PanelController`` (slide-over panel) for the form-based flows.

Invariants enforced:
    - User email is unique case-insensitively at creation time.
    - Creations prepend (newest first).
    - Every successful create/update/delete appends exactly one audit line;
      deleting an unknown id is a silent no-op with no audit line.

Failure modes:
    - DuplicateEmailError: ``add_user`` with an email already in use.
    - UserNotFoundError / SupplierNotFoundError: update of an unknown id.
    - PasswordMismatchError / PasswordTooShortError: ``change_password``.
"""

from stock_kernel.domain.ids import IdGenerator, UuidGenerator
from stock_kernel.domain.models import Profile, Supplier, User
from stock_kernel.exceptions import (
    DuplicateEmailError,
    PasswordMismatchError,
    PasswordTooShortError,
    SupplierNotFoundError,
    UserNotFoundError,
)
from stock_kernel.logging_config import LogContext, get_logger
from stock_kernel.services.audit_recorder import AuditRecorder
from stock_kernel.store import EntityStore

logger = get_logger("services.directory")

DEFAULT_AVATAR_TEMPLATE = "https://i.pravatar.cc/150?u={email}"
DEFAULT_MIN_PASSWORD_LENGTH = 6


class DirectoryManager:
    """
    User and supplier management.

    Contract:
        Every mutating method runs one store transaction containing the
        collection change and its audit line.

    Non-goals:
        - ``update_user`` does NOT re-check email uniqueness.
        - ``change_password`` does NOT store credentials; there is no
          credential store.  It only validates the two inputs.
    """

    def __init__(
        self,
        store: EntityStore,
        audit: AuditRecorder,
        id_generator: IdGenerator | None = None,
        actor_name: str = "Administrator",
        avatar_url_template: str = DEFAULT_AVATAR_TEMPLATE,
        min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
    ):
        self._store = store
        self._audit = audit
        self._ids = id_generator or UuidGenerator()
        self._actor_name = actor_name
        self._avatar_url_template = avatar_url_template
        self._min_password_length = min_password_length

    # =========================================================================
    # Users
    # =========================================================================

    def add_user(
        self,
        name: str,
        email: str,
        profile: Profile | str,
        actor: str | None = None,
    ) -> User:
        """
        Create a user with a generated id and default avatar.

        Raises:
            DuplicateEmailError: If any user's email matches case-insensitively.
            ValueError: If ``profile`` is not a known profile value.
        """
        actor_name = actor or self._actor_name
        profile = Profile(profile)
        with LogContext.bind(actor=actor_name, operation="add_user"):
            with self._store.transaction() as tx:
                wanted = email.lower()
                if any(u.email.lower() == wanted for u in tx.users):
                    logger.warning("user_email_duplicate", extra={"email": email})
                    raise DuplicateEmailError(email)

                user = User(
                    id=self._ids.next_id(),
                    name=name,
                    email=email,
                    profile=profile,
                    avatar_url=self._avatar_url_template.format(email=email),
                )
                tx.prepend_user(user)
                self._audit.record(actor_name, f"Created user {name}.")

            logger.info(
                "user_created",
                extra={"user_id": user.id, "email": email, "profile": profile.value},
            )
            return user

    def update_user(self, user: User, actor: str | None = None) -> User:
        """
        Replace the stored user having ``user.id``.

        Also the path for replacing a user's avatar reference.

        Raises:
            UserNotFoundError: If no user has ``user.id``.
        """
        actor_name = actor or self._actor_name
        with LogContext.bind(actor=actor_name, operation="update_user", entity_id=user.id):
            with self._store.transaction() as tx:
                if not tx.replace_user(user):
                    logger.warning("user_update_unknown", extra={"user_id": user.id})
                    raise UserNotFoundError(user.id)
                self._audit.record(actor_name, f"Updated user {user.name}.")

            logger.info("user_updated", extra={"user_id": user.id})
            return user

    def delete_user(self, user_id: str, actor: str | None = None) -> User | None:
        """Remove a user by id.  Unknown id: no-op, no audit, returns None."""
        actor_name = actor or self._actor_name
        with LogContext.bind(actor=actor_name, operation="delete_user", entity_id=user_id):
            with self._store.transaction() as tx:
                removed = tx.remove_user(user_id)
                if removed is not None:
                    self._audit.record(actor_name, f"Deleted user {removed.name}.")

            if removed is None:
                logger.info("user_delete_noop", extra={"user_id": user_id})
            else:
                logger.info("user_deleted", extra={"user_id": user_id})
            return removed

    def change_password(self, new_password: str, confirm_password: str) -> None:
        """
        Validate a password change request.

        The mismatch check runs before the length check.

        Raises:
            PasswordMismatchError: If the two values differ.
            PasswordTooShortError: If shorter than the configured minimum.
        """
        if new_password != confirm_password:
            logger.warning("password_mismatch")
            raise PasswordMismatchError()
        if len(new_password) < self._min_password_length:
            logger.warning(
                "password_too_short",
                extra={"length": len(new_password), "min_length": self._min_password_length},
            )
            raise PasswordTooShortError(len(new_password), self._min_password_length)
        logger.info("password_change_accepted")

    # =========================================================================
    # Suppliers
    # =========================================================================

    def add_supplier(
        self,
        name: str,
        contact: str = "",
        email: str = "",
        phone: str = "",
        actor: str | None = None,
    ) -> Supplier:
        actor_name = actor or self._actor_name
        with LogContext.bind(actor=actor_name, operation="add_supplier"):
            with self._store.transaction() as tx:
                supplier = Supplier(
                    id=self._ids.next_id(),
                    name=name,
                    contact=contact,
                    email=email,
                    phone=phone,
                )
                tx.prepend_supplier(supplier)
                self._audit.record(actor_name, f"Added supplier {name}.")

            logger.info("supplier_created", extra={"supplier_id": supplier.id})
            return supplier

    def update_supplier(self, supplier: Supplier, actor: str | None = None) -> Supplier:
        """
        Raises:
            SupplierNotFoundError: If no supplier has ``supplier.id``.
        """
        actor_name = actor or self._actor_name
        with LogContext.bind(
            actor=actor_name, operation="update_supplier", entity_id=supplier.id
        ):
            with self._store.transaction() as tx:
                if not tx.replace_supplier(supplier):
                    logger.warning(
                        "supplier_update_unknown", extra={"supplier_id": supplier.id}
                    )
                    raise SupplierNotFoundError(supplier.id)
                self._audit.record(actor_name, f"Updated supplier {supplier.name}.")

            logger.info("supplier_updated", extra={"supplier_id": supplier.id})
            return supplier

    def delete_supplier(self, supplier_id: str, actor: str | None = None) -> Supplier | None:
        """Remove a supplier by id.  Unknown id: no-op, no audit, returns None."""
        actor_name = actor or self._actor_name
        with LogContext.bind(
            actor=actor_name, operation="delete_supplier", entity_id=supplier_id
        ):
            with self._store.transaction() as tx:
                removed = tx.remove_supplier(supplier_id)
                if removed is not None:
                    self._audit.record(actor_name, f"Deleted supplier {removed.name}.")

            if removed is None:
                logger.info("supplier_delete_noop", extra={"supplier_id": supplier_id})
            else:
                logger.info("supplier_deleted", extra={"supplier_id": supplier_id})
            return removed
