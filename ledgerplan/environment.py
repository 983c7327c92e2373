"""
Resolution environment - the run-scoped symbol table.

Maps symbols ($Admin, $Shipper, ...) to address strings. It is seeded with
caller-supplied role addresses and grows by one $<name> entry per successful
deployment. It never shrinks during a run and is discarded afterwards; a new
run always starts from a fresh environment.

One environment belongs to exactly one run. It is passed explicitly to the
executor instead of living in module state, so independent runs (and tests)
never see each other's bindings.
"""

from typing import Any, Iterator, Mapping, Optional

from ledgerplan.errors import UnresolvedReferenceError
from ledgerplan.schemas import Argument, Literal, Reference, symbol_for


class ResolutionEnvironment:
    """
    Insertion-ordered symbol table for one deployment run.

    Usage:
        env = ResolutionEnvironment()
        env.seed({"Admin": "0xAAA"})
        env.resolve(Reference("$Admin"))   # -> "0xAAA"
        env.record("$RoleManager", "0x123...")
    """

    def __init__(self, bindings: Optional[Mapping[str, str]] = None):
        self._symbols: dict[str, str] = {}
        self._deployed: list[str] = []
        if bindings:
            self.seed(bindings)

    def seed(self, bindings: Mapping[str, str]) -> None:
        """
        Bind caller-supplied role addresses.

        Keys may be given with or without the $ marker.

        Args:
            bindings: Mapping of role name/symbol to address
        """
        for name, address in bindings.items():
            self._symbols[symbol_for(name)] = address

    def record(self, symbol: str, address: str) -> None:
        """
        Record a deployed component's address.

        Inserts or overwrites. An overwritten symbol keeps its original
        position in the ordered snapshot.
        """
        symbol = symbol_for(symbol)
        self._symbols[symbol] = address
        if symbol not in self._deployed:
            self._deployed.append(symbol)

    def resolve(self, argument: Argument, component: Optional[str] = None) -> Any:
        """
        Resolve an Argument to a concrete value.

        Args:
            argument: Literal or Reference
            component: Component being processed, for error reporting

        Returns:
            The literal value, or the address bound to the reference

        Raises:
            UnresolvedReferenceError: If a Reference symbol is not bound
        """
        if isinstance(argument, Literal):
            return argument.value
        if isinstance(argument, Reference):
            if argument.symbol not in self._symbols:
                raise UnresolvedReferenceError(argument.symbol, component=component)
            return self._symbols[argument.symbol]
        raise TypeError(f"Not an Argument: {argument!r}")

    def resolve_all(self, arguments, component: Optional[str] = None) -> list[Any]:
        """Resolve a sequence of Arguments, failing on the first unbound reference."""
        return [self.resolve(a, component=component) for a in arguments]

    def lookup(self, symbol: str) -> Optional[str]:
        return self._symbols.get(symbol_for(symbol))

    def is_deployed(self, name: str) -> bool:
        """True if the component was deployed (recorded) during this run."""
        return symbol_for(name) in self._deployed

    def deployed_symbols(self) -> list[str]:
        return list(self._deployed)

    def snapshot_ordered(self) -> list[tuple[str, str]]:
        """All (symbol, address) pairs in insertion order."""
        return list(self._symbols.items())

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and symbol_for(symbol) in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __repr__(self) -> str:
        return f"ResolutionEnvironment(symbols={len(self._symbols)}, deployed={len(self._deployed)})"
