# Status transition tables for applications and campaigns
# Every status write goes through ensure_transition()

from typing import Dict, FrozenSet, Type
import enum

from database.marketplace_models import ApplicationStatusDB, CampaignStatusDB
from services.errors import InvalidState


APPLICATION_TRANSITIONS: Dict[ApplicationStatusDB, FrozenSet[ApplicationStatusDB]] = {
    ApplicationStatusDB.PENDING: frozenset({
        ApplicationStatusDB.ACCEPTED,
        ApplicationStatusDB.REJECTED,
        ApplicationStatusDB.CANCELLED,
    }),
    ApplicationStatusDB.ACCEPTED: frozenset({ApplicationStatusDB.COMPLETED}),
    ApplicationStatusDB.REJECTED: frozenset(),
    ApplicationStatusDB.COMPLETED: frozenset(),
    ApplicationStatusDB.CANCELLED: frozenset(),
}

CAMPAIGN_TRANSITIONS: Dict[CampaignStatusDB, FrozenSet[CampaignStatusDB]] = {
    CampaignStatusDB.DRAFT: frozenset({CampaignStatusDB.ACTIVE, CampaignStatusDB.CANCELLED}),
    CampaignStatusDB.ACTIVE: frozenset({
        CampaignStatusDB.PAUSED,
        CampaignStatusDB.COMPLETED,
        CampaignStatusDB.CANCELLED,
    }),
    CampaignStatusDB.PAUSED: frozenset({
        CampaignStatusDB.ACTIVE,
        CampaignStatusDB.COMPLETED,
        CampaignStatusDB.CANCELLED,
    }),
    CampaignStatusDB.COMPLETED: frozenset(),
    CampaignStatusDB.CANCELLED: frozenset(),
}

_TABLES: Dict[Type[enum.Enum], Dict] = {
    ApplicationStatusDB: APPLICATION_TRANSITIONS,
    CampaignStatusDB: CAMPAIGN_TRANSITIONS,
}


def can_transition(current: enum.Enum, new: enum.Enum) -> bool:
    table = _TABLES[type(current)]
    return type(current)(new) in table[current]


def ensure_transition(current: enum.Enum, new: enum.Enum, entity: str = "Status") -> None:
    """Raise InvalidState unless current -> new is in the entity's table."""
    if not can_transition(current, new):
        raise InvalidState(
            f"{entity} cannot move from '{current.value}' to '{type(current)(new).value}'"
        )


def is_terminal(status: enum.Enum) -> bool:
    return not _TABLES[type(status)][status]
