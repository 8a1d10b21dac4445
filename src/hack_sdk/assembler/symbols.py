"""
Hack Symbol Table
=================

One SymbolTable is created for each assembly run and passed explicitly
into both passes; nothing is shared between runs.

The table merges three disjoint namespaces with a fixed precedence:

1. **Predefined** - R0..R15, SP, LCL, ARG, THIS, THAT, SCREEN, KBD
2. **Label** - bound during pass 1 to an instruction index
3. **Variable** - allocated during pass 2, starting at address 16

Lookups never mutate the table. The only mutating resolution operation is
resolve_or_allocate(), which hands out a new variable address on a miss.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from hack_sdk.errors import (
    AddressRangeError,
    DuplicateSymbolError,
    SourceLocation,
)
from hack_sdk.assembler.opcodes import (
    MAX_ADDRESS,
    PREDEFINED_SYMBOLS,
    VARIABLE_BASE,
)

logger = logging.getLogger(__name__)

_DECIMAL = re.compile(r"[0-9]+")


class SymbolKind(Enum):
    """Namespace a symbol was bound in."""
    PREDEFINED = "predefined"
    LABEL = "label"
    VARIABLE = "variable"


@dataclass
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Symbol name (case-sensitive)
        value: Resolved 15-bit address
        kind: Namespace the symbol belongs to
        location: Where the symbol was defined or first referenced
    """
    name: str
    value: int
    kind: SymbolKind
    location: Optional[SourceLocation] = None


class SymbolTable:
    """
    Per-run symbol table with predefined, label and variable namespaces.

    Example:
        >>> table = SymbolTable()
        >>> table.define_label("LOOP", 4)
        >>> table.resolve_or_allocate("LOOP")
        4
        >>> table.resolve_or_allocate("i")
        16
        >>> table.resolve_or_allocate("i")
        16
    """

    def __init__(self, allow_redefinition: bool = False):
        """
        Args:
            allow_redefinition: If True, a label defined twice takes the later
                                address and a warning is logged instead of
                                raising DuplicateSymbolError.
        """
        self._allow_redefinition = allow_redefinition
        self._labels: dict[str, Symbol] = {}
        self._variables: dict[str, Symbol] = {}
        self._next_variable = VARIABLE_BASE

    # =========================================================================
    # Pass 1: Labels
    # =========================================================================

    def define_label(
        self,
        name: str,
        address: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        """
        Bind a label to an instruction index.

        Raises:
            DuplicateSymbolError: If the label is already bound and
                                  redefinition is not allowed
            AddressRangeError: If the address does not fit in 15 bits
        """
        if address > MAX_ADDRESS:
            raise AddressRangeError(
                address, location=location, source_line=source_line,
                what=f"label '{name}' address",
            )

        existing = self._labels.get(name)
        if existing is not None:
            if not self._allow_redefinition:
                raise DuplicateSymbolError(
                    name,
                    location=location,
                    original_location=existing.location,
                    source_line=source_line,
                )
            logger.warning(
                f"{location or '<input>'}: label '{name}' redefined "
                f"(was {existing.value}, now {address})"
            )

        if name in PREDEFINED_SYMBOLS:
            logger.debug(
                f"{location or '<input>'}: label '{name}' is shadowed by the "
                f"predefined symbol of the same name"
            )

        self._labels[name] = Symbol(name, address, SymbolKind.LABEL, location)

    # =========================================================================
    # Lookup
    # =========================================================================

    def lookup(self, name: str) -> Optional[int]:
        """Return the address bound to name, or None. Never allocates."""
        if name in PREDEFINED_SYMBOLS:
            return PREDEFINED_SYMBOLS[name]
        if name in self._labels:
            return self._labels[name].value
        if name in self._variables:
            return self._variables[name].value
        return None

    def kind_of(self, name: str) -> Optional[SymbolKind]:
        """Return the namespace name resolves through, or None if unbound."""
        if name in PREDEFINED_SYMBOLS:
            return SymbolKind.PREDEFINED
        if name in self._labels:
            return SymbolKind.LABEL
        if name in self._variables:
            return SymbolKind.VARIABLE
        return None

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    # =========================================================================
    # Pass 2: Resolve or allocate
    # =========================================================================

    def resolve_or_allocate(
        self,
        token: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> int:
        """
        Resolve an addressing-instruction token to a 15-bit address.

        Decimal literals are used as-is. Names are looked up in predefined,
        label, then variable order; an unknown name becomes a new variable
        at the next free address.

        Raises:
            AddressRangeError: If a literal or new variable exceeds 15 bits
        """
        if _DECIMAL.fullmatch(token):
            value = int(token)
            if value > MAX_ADDRESS:
                raise AddressRangeError(
                    value, location=location, source_line=source_line,
                )
            return value

        address = self.lookup(token)
        if address is not None:
            return address

        return self._allocate_variable(token, location, source_line)

    def _allocate_variable(
        self,
        name: str,
        location: Optional[SourceLocation],
        source_line: Optional[str],
    ) -> int:
        address = self._next_variable
        if address > MAX_ADDRESS:
            raise AddressRangeError(
                address, location=location, source_line=source_line,
                what=f"variable '{name}' address",
            )
        self._variables[name] = Symbol(name, address, SymbolKind.VARIABLE, location)
        self._next_variable += 1
        logger.debug(f"allocated variable '{name}' at {address}")
        return address

    # =========================================================================
    # Inspection
    # =========================================================================

    @property
    def labels(self) -> dict[str, int]:
        """Label bindings, in definition order."""
        return {name: sym.value for name, sym in self._labels.items()}

    @property
    def variables(self) -> dict[str, int]:
        """Variable bindings, in allocation order."""
        return {name: sym.value for name, sym in self._variables.items()}

    @property
    def next_variable_address(self) -> int:
        return self._next_variable

    def user_symbols(self) -> list[Symbol]:
        """Labels and variables sorted by address, then name."""
        symbols = list(self._labels.values()) + list(self._variables.values())
        return sorted(symbols, key=lambda s: (s.value, s.name))
