"""
Panel drafts -- transient, not-yet-saved form state of the slide-over panel.

Each panel mode has its own draft variant carrying only the fields that
mode edits, so a draft can never hold a field combination its mode does
not use.  Drafts are frozen; edits produce a new draft.

    PanelMode.ADD_USER         -> NewUserDraft
    PanelMode.EDIT_USER        -> EditUserDraft
    PanelMode.CHANGE_PASSWORD  -> PasswordDraft
    PanelMode.ADD_SUPPLIER     -> NewSupplierDraft
    PanelMode.EDIT_SUPPLIER    -> EditSupplierDraft
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from stock_kernel.domain.models import Profile, Supplier, User


class PanelMode(Enum):
    ADD_USER = "addUser"
    EDIT_USER = "editUser"
    CHANGE_PASSWORD = "changePassword"
    ADD_SUPPLIER = "addSupplier"
    EDIT_SUPPLIER = "editSupplier"

    @property
    def needs_target(self) -> bool:
        return self in (
            PanelMode.EDIT_USER,
            PanelMode.CHANGE_PASSWORD,
            PanelMode.EDIT_SUPPLIER,
        )


@dataclass(frozen=True)
class NewUserDraft:
    name: str = ""
    email: str = ""
    profile: Profile = Profile.OPERATOR


@dataclass(frozen=True)
class EditUserDraft:
    user_id: str
    name: str
    email: str
    profile: Profile
    avatar_url: str = ""

    @classmethod
    def from_user(cls, user: User) -> "EditUserDraft":
        return cls(
            user_id=user.id,
            name=user.name,
            email=user.email,
            profile=user.profile,
            avatar_url=user.avatar_url,
        )

    def to_user(self) -> User:
        return User(
            id=self.user_id,
            name=self.name,
            email=self.email,
            profile=self.profile,
            avatar_url=self.avatar_url,
        )


@dataclass(frozen=True)
class PasswordDraft:
    user_id: str
    user_name: str
    new_password: str = ""
    confirm_password: str = ""


@dataclass(frozen=True)
class NewSupplierDraft:
    name: str = ""
    contact: str = ""
    email: str = ""
    phone: str = ""


@dataclass(frozen=True)
class EditSupplierDraft:
    supplier_id: str
    name: str
    contact: str = ""
    email: str = ""
    phone: str = ""

    @classmethod
    def from_supplier(cls, supplier: Supplier) -> "EditSupplierDraft":
        return cls(
            supplier_id=supplier.id,
            name=supplier.name,
            contact=supplier.contact,
            email=supplier.email,
            phone=supplier.phone,
        )

    def to_supplier(self) -> Supplier:
        return Supplier(
            id=self.supplier_id,
            name=self.name,
            contact=self.contact,
            email=self.email,
            phone=self.phone,
        )


PanelDraft = (
    NewUserDraft | EditUserDraft | PasswordDraft | NewSupplierDraft | EditSupplierDraft
)


def draft_for(mode: PanelMode, target: User | Supplier | None) -> PanelDraft:
    """
    Build the initial draft for ``mode`` loaded from ``target``.

    Raises:
        TypeError: If ``target`` is missing or of the wrong kind for ``mode``.
    """
    if mode is PanelMode.ADD_USER:
        return NewUserDraft()
    if mode is PanelMode.ADD_SUPPLIER:
        return NewSupplierDraft()
    if mode in (PanelMode.EDIT_USER, PanelMode.CHANGE_PASSWORD):
        if not isinstance(target, User):
            raise TypeError(f"{mode.value} requires a User target, got {target!r}")
        if mode is PanelMode.EDIT_USER:
            return EditUserDraft.from_user(target)
        return PasswordDraft(user_id=target.id, user_name=target.name)
    if not isinstance(target, Supplier):
        raise TypeError(f"{mode.value} requires a Supplier target, got {target!r}")
    return EditSupplierDraft.from_supplier(target)


@dataclass(frozen=True)
class PanelState:
    """
    Panel state machine value: ``closed`` or ``open(mode, target)``.

    ``errors`` maps a form field name to the message shown under it after a
    rejected save.
    """
    mode: PanelMode | None = None
    target: User | Supplier | None = None
    draft: PanelDraft | None = None
    errors: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "errors", MappingProxyType(dict(self.errors)))

    @property
    def is_open(self) -> bool:
        return self.mode is not None

    @classmethod
    def closed(cls) -> "PanelState":
        return cls()
