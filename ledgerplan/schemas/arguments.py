"""
Argument variant used by constructor args, wiring args and hook params.

A plan value is either a Literal passed through unchanged, or a Reference
to a symbol in the resolution environment. Plan files are parsed into
these once, when the plan is loaded; nothing downstream sniffs string
prefixes.

Plan file forms:
    "$Admin"              -> Reference("$Admin")
    {"ref": "Admin"}      -> Reference("$Admin")
    {"literal": "$5"}     -> Literal("$5")
    42, "abc", [1, 2]     -> Literal(...)
"""

from dataclasses import dataclass
from typing import Any, Union

# Reserved marker that prefixes every symbol in the environment
REF_MARKER = "$"


@dataclass(frozen=True)
class Literal:
    """A value passed to the ledger as-is."""
    value: Any

    def to_plan_value(self) -> Any:
        if isinstance(self.value, str) and self.value.startswith(REF_MARKER):
            return {"literal": self.value}
        return self.value


@dataclass(frozen=True)
class Reference:
    """A symbol resolved against the environment when its item runs."""
    symbol: str

    def __post_init__(self):
        if not self.symbol.startswith(REF_MARKER) or len(self.symbol) < 2:
            raise ValueError(f"Reference symbol must look like '$Name', got: {self.symbol!r}")

    @property
    def name(self) -> str:
        """Symbol without the marker."""
        return self.symbol[len(REF_MARKER):]

    def to_plan_value(self) -> str:
        return self.symbol


Argument = Union[Literal, Reference]


def symbol_for(name: str) -> str:
    """Return the environment symbol for a component or role name."""
    if name.startswith(REF_MARKER):
        return name
    return f"{REF_MARKER}{name}"


def parse_argument(value: Any) -> Argument:
    """
    Parse a raw plan value into an Argument.

    Args:
        value: Value as read from YAML/JSON

    Returns:
        Literal or Reference

    Raises:
        ValueError: If a {"ref": ...} mapping does not name a symbol
    """
    if isinstance(value, (Literal, Reference)):
        return value
    if isinstance(value, str) and value.startswith(REF_MARKER):
        return Reference(value)
    if isinstance(value, dict) and len(value) == 1:
        if "ref" in value:
            ref = value["ref"]
            if not isinstance(ref, str) or not ref:
                raise ValueError(f"'ref' must be a non-empty string, got: {ref!r}")
            return Reference(symbol_for(ref))
        if "literal" in value:
            return Literal(value["literal"])
    return Literal(value)


def parse_arguments(values: Any) -> tuple[Argument, ...]:
    """Parse a list of raw plan values; a bare scalar becomes a one-element tuple."""
    if values is None:
        return ()
    if not isinstance(values, (list, tuple)):
        values = [values]
    return tuple(parse_argument(v) for v in values)
