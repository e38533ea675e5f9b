# Atomic counter updates
# Counters are changed with UPDATE ... SET col = col + n so concurrent
# requests never lose an increment. Callers commit.

from typing import Any, Iterable, Optional, Type

from sqlalchemy.orm import Session


def adjust(
    db: Session,
    model: Type[Any],
    entity_id: str,
    where: Optional[Iterable[Any]] = None,
    **deltas: int,
) -> int:
    """
    Apply field deltas to one row, optionally guarded by extra conditions.

    Returns the number of rows updated (0 when the row is missing or a
    guard condition did not hold).
    """
    values = {
        getattr(model, field): getattr(model, field) + delta
        for field, delta in deltas.items()
    }
    query = db.query(model).filter(model.id == entity_id)
    for condition in where or ():
        query = query.filter(condition)
    return query.update(values, synchronize_session=False)


def increment(db: Session, model: Type[Any], entity_id: str, field: str, by: int = 1) -> int:
    return adjust(db, model, entity_id, **{field: by})


def decrement(db: Session, model: Type[Any], entity_id: str, field: str, by: int = 1) -> int:
    """Decrease a counter without letting it drop below zero."""
    column = getattr(model, field)
    return adjust(db, model, entity_id, where=[column >= by], **{field: -by})


def reset(db: Session, model: Type[Any], entity_id: str, field: str) -> int:
    return db.query(model).filter(model.id == entity_id).update(
        {getattr(model, field): 0}, synchronize_session=False
    )
