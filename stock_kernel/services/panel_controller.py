"""
PanelController -- slide-over edit panel and delete confirmation.

Responsibility:
    Drives the form flows of the control page: opening the panel in one of
    five modes with a draft loaded from the target record, editing the
    draft, saving through ``DirectoryManager``, cancelling, and the
    two-step confirmation for deleting a user or supplier.

Architecture position:
    Kernel > Services.  Holds view-facing transient state only; every store
    change goes through ``DirectoryManager``.

State machine:

    closed --open(mode, target)--> open(mode, target)
    open   --edit(**fields)------> open (new draft)
    open   --save() ok-----------> closed
    open   --save() fails--------> open (errors set, exception re-raised)
    open   --cancel()------------> closed (draft discarded, store untouched)

    no pending --request_delete(e)--> pending(e)
    pending    --confirm_delete()---> no pending (entity deleted)
    pending    --dismiss_delete()---> no pending (store untouched)

Failure modes:
    - PanelStateError: save/edit while closed, wrong target for a mode,
      unknown or read-only draft field, unknown profile, confirm with
      nothing pending.
    - DirectoryError subclasses propagate from ``save()`` after being
      recorded in ``state.errors``.
"""

from dataclasses import fields, replace
from typing import Any

from stock_kernel.domain.drafts import (
    EditSupplierDraft,
    EditUserDraft,
    NewSupplierDraft,
    NewUserDraft,
    PanelDraft,
    PanelMode,
    PanelState,
    PasswordDraft,
    draft_for,
)
from stock_kernel.domain.models import Profile, Supplier, User
from stock_kernel.exceptions import (
    DirectoryError,
    DuplicateEmailError,
    PanelStateError,
    PasswordMismatchError,
    PasswordTooShortError,
)
from stock_kernel.logging_config import get_logger
from stock_kernel.services.directory_manager import DirectoryManager

logger = get_logger("services.panel")

_READ_ONLY_FIELDS = frozenset({"user_id", "supplier_id", "user_name"})


def _error_field(exc: DirectoryError) -> str:
    if isinstance(exc, DuplicateEmailError):
        return "email"
    if isinstance(exc, (PasswordMismatchError, PasswordTooShortError)):
        return "password"
    return "form"


class PanelController:
    """
    View-state controller for the user/supplier panel.

    Guarantees:
        - ``cancel()`` and ``dismiss_delete()`` never touch the store.
        - A successful ``save()`` dispatches exactly one directory operation.
    """

    def __init__(self, directory: DirectoryManager):
        self._directory = directory
        self._state = PanelState.closed()
        self._pending_delete: User | Supplier | None = None

    @property
    def state(self) -> PanelState:
        return self._state

    @property
    def pending_delete(self) -> User | Supplier | None:
        return self._pending_delete

    # -- panel -----------------------------------------------------------------

    def open(self, mode: PanelMode, target: User | Supplier | None = None) -> PanelState:
        if not mode.needs_target and target is not None:
            raise PanelStateError(f"{mode.value} does not take a target")
        try:
            draft = draft_for(mode, target)
        except TypeError as exc:
            raise PanelStateError(str(exc)) from exc

        self._state = PanelState(mode=mode, target=target, draft=draft)
        logger.debug(
            "panel_opened",
            extra={"mode": mode.value, "target_id": getattr(target, "id", None)},
        )
        return self._state

    def edit(self, **changes: Any) -> PanelDraft:
        """Return and keep a new draft with ``changes`` applied."""
        draft = self._require_open("edit")
        allowed = {f.name for f in fields(draft)} - _READ_ONLY_FIELDS
        unknown = set(changes) - allowed
        if unknown:
            raise PanelStateError(
                f"fields {sorted(unknown)} are not editable in {self._state.mode.value}"
            )
        if "profile" in changes:
            try:
                changes["profile"] = Profile(changes["profile"])
            except ValueError as exc:
                raise PanelStateError(f"unknown profile {changes['profile']!r}") from exc

        new_draft = replace(draft, **changes)
        self._state = replace(self._state, draft=new_draft, errors={})
        return new_draft

    def save(self) -> User | Supplier | None:
        """
        Validate the draft and dispatch the matching directory operation.

        Returns:
            The created/updated record, or None for a password change.

        Raises:
            PanelStateError: If the panel is closed.
            DirectoryError: Propagated from the directory manager; the panel
                stays open with ``state.errors`` filled in.
        """
        draft = self._require_open("save")
        mode = self._state.mode
        try:
            result = self._dispatch(draft)
        except DirectoryError as exc:
            self._state = replace(self._state, errors={_error_field(exc): str(exc)})
            logger.info(
                "panel_save_rejected",
                extra={"mode": mode.value, "error_code": exc.code},
            )
            raise

        logger.debug("panel_saved", extra={"mode": mode.value})
        self._state = PanelState.closed()
        return result

    def cancel(self) -> None:
        if self._state.is_open:
            logger.debug("panel_cancelled", extra={"mode": self._state.mode.value})
        self._state = PanelState.closed()

    def _require_open(self, action: str) -> PanelDraft:
        if not self._state.is_open or self._state.draft is None:
            raise PanelStateError(f"cannot {action} while the panel is closed")
        return self._state.draft

    def _dispatch(self, draft: PanelDraft) -> User | Supplier | None:
        if isinstance(draft, NewUserDraft):
            return self._directory.add_user(draft.name, draft.email, draft.profile)
        if isinstance(draft, EditUserDraft):
            return self._directory.update_user(draft.to_user())
        if isinstance(draft, PasswordDraft):
            self._directory.change_password(draft.new_password, draft.confirm_password)
            logger.info("user_password_changed", extra={"user_id": draft.user_id})
            return None
        if isinstance(draft, NewSupplierDraft):
            return self._directory.add_supplier(
                draft.name, draft.contact, draft.email, draft.phone
            )
        if isinstance(draft, EditSupplierDraft):
            return self._directory.update_supplier(draft.to_supplier())
        raise PanelStateError(f"unsupported draft {type(draft).__name__}")

    # -- delete confirmation ----------------------------------------------------

    def request_delete(self, entity: User | Supplier) -> None:
        if not isinstance(entity, (User, Supplier)):
            raise PanelStateError(f"cannot delete {entity!r}")
        self._pending_delete = entity

    def confirm_delete(self) -> User | Supplier | None:
        """Delete the pending entity and clear the selection."""
        entity = self._pending_delete
        if entity is None:
            raise PanelStateError("no deletion pending")
        self._pending_delete = None
        if isinstance(entity, User):
            return self._directory.delete_user(entity.id)
        return self._directory.delete_supplier(entity.id)

    def dismiss_delete(self) -> None:
        self._pending_delete = None
