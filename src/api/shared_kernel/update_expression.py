"""Update expression compilation for key-value record stores.

Turns a partial record (attribute name -> new value) into a store-native
update expression made of ``SET`` and ``REMOVE`` clauses with placeholder
names and values, in the style of DynamoDB ``UpdateExpression``.

Every attribute gets a name placeholder, so the compiled expression stays
valid whichever attribute names collide with reserved words of the store.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

NAME_PLACEHOLDER_PREFIX = "#"
VALUE_PLACEHOLDER_PREFIX = ":"


def is_empty_value(value: Any) -> bool:
    """Return True for values that compile to a REMOVE clause.

    Only ``None`` and the empty string count as empty. ``0``, ``False`` and
    empty collections are real values and are SET.
    """
    return value is None or value == ""


@dataclass(frozen=True)
class CompiledUpdate:
    """Result of compiling a partial record into an update expression.

    Attributes:
        attribute_names: Name placeholder -> real attribute name, for every
            attribute in the input.
        attribute_values: Value placeholder -> value, for SET attributes only.
        set_fields: Attribute names assigned by the expression, in input order.
        remove_fields: Attribute names removed by the expression, in input order.
    """

    attribute_names: dict[str, str] = field(default_factory=dict)
    attribute_values: dict[str, Any] = field(default_factory=dict)
    set_fields: tuple[str, ...] = ()
    remove_fields: tuple[str, ...] = ()

    @property
    def expression(self) -> str:
        """Render the update expression string.

        Returns an empty string when there is nothing to set or remove.
        """
        clauses: list[str] = []
        if self.set_fields:
            assignments = ", ".join(
                f"{_name_placeholder(name)} = {_value_placeholder(name)}"
                for name in self.set_fields
            )
            clauses.append(f"SET {assignments}")
        if self.remove_fields:
            removals = ", ".join(_name_placeholder(name) for name in self.remove_fields)
            clauses.append(f"REMOVE {removals}")
        return " ".join(clauses)

    @property
    def is_empty(self) -> bool:
        """True when the expression has no clauses."""
        return not self.set_fields and not self.remove_fields

    def assignments(self) -> dict[str, Any]:
        """Return the SET part as attribute name -> value."""
        return {
            name: self.attribute_values[_value_placeholder(name)]
            for name in self.set_fields
        }


def _name_placeholder(name: str) -> str:
    return f"{NAME_PLACEHOLDER_PREFIX}{name}"


def _value_placeholder(name: str) -> str:
    return f"{VALUE_PLACEHOLDER_PREFIX}{name}"


def compile_update_expression(fields: Mapping[str, Any]) -> CompiledUpdate:
    """Compile a partial record into a CompiledUpdate.

    Attributes are processed in the mapping's iteration order, so identical
    input always yields an identical expression. Attributes whose value is
    empty (see ``is_empty_value``) become REMOVE clauses, all others SET
    clauses. The key attribute is not special-cased here; callers strip it
    before compiling.

    Args:
        fields: Attribute name -> new value

    Returns:
        The compiled update. An empty mapping yields an update with no
        clauses and an empty expression string.
    """
    attribute_names: dict[str, str] = {}
    attribute_values: dict[str, Any] = {}
    set_fields: list[str] = []
    remove_fields: list[str] = []

    for name, value in fields.items():
        attribute_names[_name_placeholder(name)] = name
        if is_empty_value(value):
            remove_fields.append(name)
        else:
            attribute_values[_value_placeholder(name)] = value
            set_fields.append(name)

    return CompiledUpdate(
        attribute_names=attribute_names,
        attribute_values=attribute_values,
        set_fields=tuple(set_fields),
        remove_fields=tuple(remove_fields),
    )


def apply_update_expression(
    item: Mapping[str, Any], update: CompiledUpdate
) -> dict[str, Any]:
    """Apply a compiled update to a stored item and return the new item.

    Attributes not mentioned by the update keep their stored values. The
    input item is not modified.
    """
    result = dict(item)
    result.update(update.assignments())
    for name in update.remove_fields:
        result.pop(name, None)
    return result
