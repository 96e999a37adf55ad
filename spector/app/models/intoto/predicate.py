"""
Predicate variants.

A statement's predicate is either a registered, typed predicate
(``KnownPredicate``) or an opaque value whose type the registry does not
know (``OtherPredicate``). An unknown predicate type is not an error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from spector.app.errors import DecodeError

if TYPE_CHECKING:
    from spector.app.registry.registry import SchemaRegistry


class KnownPredicate(BaseModel):
    identifier: str
    predicate_type: str
    value: BaseModel

    model_config = ConfigDict(frozen=True)


class OtherPredicate(BaseModel):
    predicate_type: str
    value: Any

    model_config = ConfigDict(frozen=True)


Predicate = Union[KnownPredicate, OtherPredicate]


def resolve_predicate(
    predicate_type: str,
    predicate_value: Any,
    registry: "SchemaRegistry",
) -> Predicate:
    """
    Decode ``predicate_value`` according to ``predicate_type``.

    Raises:
        DecodeError: the predicate type is registered but the value does
            not fit its typed model.
    """
    entry = registry.find_by_predicate_type(predicate_type)
    if entry is None or entry.decoder is None:
        return OtherPredicate(
            predicate_type=predicate_type,
            value=predicate_value,
        )

    try:
        value = entry.decoder.model_validate(predicate_value)
    except ValidationError as exc:
        raise DecodeError(
            f"Predicate of type {predicate_type} does not match "
            f"{entry.identifier}: {exc}"
        ) from exc

    return KnownPredicate(
        identifier=entry.identifier,
        predicate_type=predicate_type,
        value=value,
    )
