"""
Equivalence predicates used by reconciliation.

Each predicate compares the record a mutation should produce ("intended")
with the record read back afterwards ("observed"). Only the fields the
mutation controls are compared, and an absent observation is never
equivalent. Lists are compared position by position: the same members in a
different order do not match.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from jamfpro.resources.computer_groups import ComputerGroup
    from jamfpro.resources.computers import Computer


def _matches(intended: BaseModel, observed: BaseModel) -> bool:
    """True when every field explicitly set on ``intended`` equals ``observed``."""
    return all(
        getattr(intended, name) == getattr(observed, name, None)
        for name in intended.model_fields_set
    )


def _same_sequence(intended: Sequence[BaseModel], observed: Sequence[BaseModel]) -> bool:
    if len(intended) != len(observed):
        return False
    return all(_matches(planned, actual) for planned, actual in zip(intended, observed))


def are_groups_equivalent(
    intended: "ComputerGroup", observed: "ComputerGroup | None"
) -> bool:
    """Compare name, id, and the ordered member and criteria lists."""
    if observed is None:
        return False
    if intended.name != observed.name:
        return False
    if intended.id != observed.id:
        return False
    if not _same_sequence(intended.computers, observed.computers):
        return False
    return _same_sequence(intended.criteria, observed.criteria)


def are_computer_records_equivalent(
    intended: "Computer", observed: "Computer | None"
) -> bool:
    if observed is None:
        return False
    return (
        intended.name == observed.name
        and intended.id == observed.id
        and intended.serial_number == observed.serial_number
    )


__all__ = ["are_groups_equivalent", "are_computer_records_equivalent"]
