"""
Tests for PanelController.

The panel is a small state machine: closed, or open in one mode with a
draft. Saves go through DirectoryManager; cancel and dismiss never touch
the store.
"""

import pytest

from stock_kernel.domain.drafts import (
    EditUserDraft,
    NewSupplierDraft,
    NewUserDraft,
    PanelMode,
    PasswordDraft,
)
from stock_kernel.domain.models import Profile, Supplier, User
from stock_kernel.exceptions import (
    DuplicateEmailError,
    PanelStateError,
    PasswordMismatchError,
    PasswordTooShortError,
)


class TestOpen:

    def test_starts_closed(self, panel):
        assert not panel.state.is_open
        assert panel.pending_delete is None

    def test_open_add_user(self, panel):
        state = panel.open(PanelMode.ADD_USER)
        assert state.is_open
        assert state.mode is PanelMode.ADD_USER
        assert state.target is None
        assert state.draft == NewUserDraft()

    def test_open_edit_user_loads_draft(self, panel, store):
        user = store.find_user("user-2")
        state = panel.open(PanelMode.EDIT_USER, user)
        assert state.target == user
        assert state.draft == EditUserDraft.from_user(user)

    def test_add_mode_rejects_target(self, panel, store):
        with pytest.raises(PanelStateError):
            panel.open(PanelMode.ADD_SUPPLIER, store.find_supplier("sup-1"))

    def test_wrong_target_kind(self, panel, store):
        with pytest.raises(PanelStateError):
            panel.open(PanelMode.EDIT_USER, store.find_supplier("sup-1"))
        assert not panel.state.is_open

    def test_reopen_replaces_state(self, panel, store):
        panel.open(PanelMode.ADD_USER)
        panel.open(PanelMode.EDIT_SUPPLIER, store.find_supplier("sup-2"))
        assert panel.state.mode is PanelMode.EDIT_SUPPLIER


class TestEdit:

    def test_edit_updates_draft(self, panel):
        panel.open(PanelMode.ADD_USER)
        draft = panel.edit(name="Carla Dias", email="carla@example.com")
        assert draft == NewUserDraft(name="Carla Dias", email="carla@example.com")
        assert panel.state.draft == draft

    def test_profile_coerced(self, panel):
        panel.open(PanelMode.ADD_USER)
        assert panel.edit(profile="Administrator").profile is Profile.ADMINISTRATOR

    def test_unknown_profile_rejected(self, panel):
        panel.open(PanelMode.ADD_USER)
        before = panel.state
        with pytest.raises(PanelStateError, match="unknown profile"):
            panel.edit(profile="bogus")
        assert panel.state is before

    def test_unknown_field_rejected(self, panel):
        panel.open(PanelMode.ADD_SUPPLIER)
        with pytest.raises(PanelStateError):
            panel.edit(profile="Operator")

    @pytest.mark.parametrize("field", ["user_id", "user_name"])
    def test_read_only_fields(self, panel, store, field):
        panel.open(PanelMode.CHANGE_PASSWORD, store.find_user("user-1"))
        with pytest.raises(PanelStateError):
            panel.edit(**{field: "changed"})

    def test_edit_while_closed(self, panel):
        with pytest.raises(PanelStateError):
            panel.edit(name="x")


class TestSave:

    def test_add_user(self, panel, store):
        panel.open(PanelMode.ADD_USER)
        panel.edit(name="Carla Dias", email="carla@example.com", profile=Profile.OPERATOR)
        user = panel.save()
        assert isinstance(user, User)
        assert store.list_users()[0] == user
        assert not panel.state.is_open

    def test_edit_user(self, panel, store):
        panel.open(PanelMode.EDIT_USER, store.find_user("user-2"))
        panel.edit(name="Bruno R. Reis", profile=Profile.ADMINISTRATOR)
        saved = panel.save()
        assert store.find_user("user-2") == saved
        assert saved.is_administrator

    def test_add_supplier(self, panel, store):
        panel.open(PanelMode.ADD_SUPPLIER)
        panel.edit(name="Cabo Wires", phone="555-0199")
        supplier = panel.save()
        assert isinstance(supplier, Supplier)
        assert store.list_suppliers()[0].name == "Cabo Wires"

    def test_edit_supplier(self, panel, store):
        panel.open(PanelMode.EDIT_SUPPLIER, store.find_supplier("sup-2"))
        panel.edit(contact="Eva Lins")
        panel.save()
        assert store.find_supplier("sup-2").contact == "Eva Lins"

    def test_change_password_returns_none(self, panel, store):
        panel.open(PanelMode.CHANGE_PASSWORD, store.find_user("user-1"))
        panel.edit(new_password="longenough", confirm_password="longenough")
        before = store.snapshot()
        assert panel.save() is None
        assert store.snapshot() is before
        assert not panel.state.is_open

    def test_duplicate_email_keeps_panel_open(self, panel, store):
        panel.open(PanelMode.ADD_USER)
        panel.edit(name="Ana Again", email="ANA@example.com")
        with pytest.raises(DuplicateEmailError):
            panel.save()
        assert panel.state.is_open
        assert "email" in panel.state.errors
        assert panel.state.draft.name == "Ana Again"

    def test_password_errors_keyed_on_password(self, panel, store):
        panel.open(PanelMode.CHANGE_PASSWORD, store.find_user("user-1"))
        panel.edit(new_password="abc", confirm_password="abd")
        with pytest.raises(PasswordMismatchError):
            panel.save()
        assert set(panel.state.errors) == {"password"}

        panel.edit(confirm_password="abc")
        assert dict(panel.state.errors) == {}
        with pytest.raises(PasswordTooShortError):
            panel.save()
        assert isinstance(panel.state.draft, PasswordDraft)

    def test_save_while_closed(self, panel):
        with pytest.raises(PanelStateError):
            panel.save()


class TestCancel:

    def test_cancel_discards_draft(self, panel, store):
        before = store.snapshot()
        panel.open(PanelMode.ADD_SUPPLIER)
        panel.edit(name="Never Saved")
        panel.cancel()
        assert not panel.state.is_open
        assert store.snapshot() is before

    def test_cancel_when_closed_is_harmless(self, panel):
        panel.cancel()
        assert panel.state.draft is None

    def test_reopen_after_cancel_starts_fresh(self, panel):
        panel.open(PanelMode.ADD_SUPPLIER)
        panel.edit(name="Draft")
        panel.cancel()
        assert panel.open(PanelMode.ADD_SUPPLIER).draft == NewSupplierDraft()


class TestDeleteConfirmation:

    def test_confirm_deletes_user(self, panel, store):
        panel.request_delete(store.find_user("user-2"))
        assert panel.pending_delete.id == "user-2"
        removed = panel.confirm_delete()
        assert removed.id == "user-2"
        assert store.find_user("user-2") is None
        assert panel.pending_delete is None

    def test_confirm_deletes_supplier(self, panel, store):
        panel.request_delete(store.find_supplier("sup-1"))
        panel.confirm_delete()
        assert store.find_supplier("sup-1") is None
        assert store.list_audit_logs()[0].action == "Deleted supplier Acme Fasteners."

    def test_dismiss_leaves_store(self, panel, store):
        before = store.snapshot()
        panel.request_delete(store.find_user("user-1"))
        panel.dismiss_delete()
        assert panel.pending_delete is None
        assert store.snapshot() is before

    def test_confirm_without_request(self, panel):
        with pytest.raises(PanelStateError):
            panel.confirm_delete()

    def test_request_rejects_other_records(self, panel, store):
        with pytest.raises(PanelStateError):
            panel.request_delete(store.find_stock_item("item-1"))
