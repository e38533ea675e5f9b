import pytest

from database.marketplace_models import ApplicationStatusDB as A, CampaignStatusDB as C
from services.errors import InvalidState
from services.state_machine import (
    APPLICATION_TRANSITIONS,
    CAMPAIGN_TRANSITIONS,
    can_transition,
    ensure_transition,
    is_terminal,
)


@pytest.mark.parametrize("current,new", [
    (A.PENDING, A.ACCEPTED),
    (A.PENDING, A.REJECTED),
    (A.PENDING, A.CANCELLED),
    (A.ACCEPTED, A.COMPLETED),
])
def test_legal_application_transitions(current, new):
    assert can_transition(current, new)
    ensure_transition(current, new)


@pytest.mark.parametrize("current,new", [
    (A.PENDING, A.COMPLETED),
    (A.ACCEPTED, A.ACCEPTED),
    (A.ACCEPTED, A.REJECTED),
    (A.ACCEPTED, A.CANCELLED),
    (A.REJECTED, A.ACCEPTED),
    (A.COMPLETED, A.ACCEPTED),
    (A.CANCELLED, A.PENDING),
])
def test_illegal_application_transitions_raise(current, new):
    assert not can_transition(current, new)
    with pytest.raises(InvalidState) as exc:
        ensure_transition(current, new, "Application")
    assert exc.value.status_code == 400
    assert f"'{current.value}'" in exc.value.detail


def test_terminal_statuses():
    assert {s for s in A if is_terminal(s)} == {A.REJECTED, A.COMPLETED, A.CANCELLED}
    assert {s for s in C if is_terminal(s)} == {C.COMPLETED, C.CANCELLED}


def test_every_status_has_a_row():
    assert set(APPLICATION_TRANSITIONS) == set(A)
    assert set(CAMPAIGN_TRANSITIONS) == set(C)


@pytest.mark.parametrize("current,new,allowed", [
    (C.DRAFT, C.ACTIVE, True),
    (C.DRAFT, C.PAUSED, False),
    (C.ACTIVE, C.PAUSED, True),
    (C.PAUSED, C.ACTIVE, True),
    (C.PAUSED, C.COMPLETED, True),
    (C.COMPLETED, C.ACTIVE, False),
    (C.CANCELLED, C.DRAFT, False),
])
def test_campaign_transitions(current, new, allowed):
    assert can_transition(current, new) is allowed


def test_string_values_are_accepted():
    assert can_transition(A.PENDING, "accepted")
