from enum import Enum

BASE_DEPTH = 0


# --- 1. Enums ---
class SymbolKind(Enum):
    VARIABLE = "variable"; CONSTANT = "constant"; FUNCTION = "function"


class VarType(Enum):
    INTEGER = "integer"; FLOAT = "float"; CHARACTER = "character"

    @property
    def size(self) -> int: return _TYPE_SIZES[self]


_TYPE_SIZES = {VarType.INTEGER: 2, VarType.FLOAT: 4, VarType.CHARACTER: 1}


class ParamMode(Enum):
    IN = "in"; OUT = "out"; INOUT = "inout"


class SymbolKindError(TypeError):
    pass


# --- 2. Kind-specific attribute blocks ---
class VariableAttributes:
    def __init__(self):
        self.type_of_variable: VarType | None = None
        self.size = 0; self.offset = 0; self.is_parameter = False

    def describe(self) -> str:
        return "param" if self.is_parameter else ""


class ConstantAttributes:
    def __init__(self):
        self.type_of_constant: VarType | None = None
        self.value: int | float = 0
        self.size = 0; self.offset = 0; self.is_parameter = False

    def describe(self) -> str:
        text = f"value={self.value}"
        return f"{text} param" if self.is_parameter else text


class FunctionAttributes:
    def __init__(self):
        self.parameter_types: list[VarType] = []
        self.parameter_modes: list[ParamMode] = []
        self.number_of_parameters = 0
        self.size_of_parameters = 0
        self.size_of_local_variables = 0

    def describe(self) -> str:
        params = ", ".join(f"{mode.value} {ptype.value}"
                           for mode, ptype in zip(self.parameter_modes, self.parameter_types))
        return (f"Params({params}) params_size={self.size_of_parameters} "
                f"locals_size={self.size_of_local_variables}")


_ATTRIBUTE_CLASSES = {
    SymbolKind.VARIABLE: VariableAttributes,
    SymbolKind.CONSTANT: ConstantAttributes,
    SymbolKind.FUNCTION: FunctionAttributes,
}


# --- 3. Symbol ---
class Symbol:
    """One declared name.

    A symbol starts out kind-unset: the analyzer registers names as soon as
    it reads them and only learns whether they are variables, constants or
    procedures later. :meth:`set_kind` installs the single attribute block
    for that kind; reading the block of any other kind raises
    :class:`SymbolKindError`.
    """

    def __init__(self, name: str, depth: int):
        self.name = name; self.depth = depth
        self.kind: SymbolKind | None = None
        self._attributes = None

    def set_kind(self, kind: SymbolKind) -> "Symbol":
        if self.kind is not None:
            raise SymbolKindError(f"symbol '{self.name}' is already a {self.kind.value}")
        self.kind = kind
        self._attributes = _ATTRIBUTE_CLASSES[kind]()
        return self

    def _attributes_for(self, kind: SymbolKind):
        if self.kind is not kind:
            found = self.kind.value if self.kind else "unset"
            raise SymbolKindError(f"symbol '{self.name}' is {found}, not {kind.value}")
        return self._attributes

    @property
    def variable(self) -> VariableAttributes: return self._attributes_for(SymbolKind.VARIABLE)

    @property
    def constant(self) -> ConstantAttributes: return self._attributes_for(SymbolKind.CONSTANT)

    @property
    def function(self) -> FunctionAttributes: return self._attributes_for(SymbolKind.FUNCTION)

    def _storage(self):
        if self.kind is SymbolKind.VARIABLE: return self.variable
        return self.constant

    @property
    def size(self) -> int: return self._storage().size

    @property
    def offset(self) -> int: return self._storage().offset

    @offset.setter
    def offset(self, value: int): self._storage().offset = value

    @property
    def is_parameter(self) -> bool:
        return self.kind is not SymbolKind.FUNCTION and self._storage().is_parameter

    @is_parameter.setter
    def is_parameter(self, value: bool): self._storage().is_parameter = value

    @property
    def value_type(self) -> VarType | None:
        if self.kind is SymbolKind.VARIABLE: return self.variable.type_of_variable
        if self.kind is SymbolKind.CONSTANT: return self.constant.type_of_constant
        return None

    def __repr__(self):
        kind = self.kind.value if self.kind else "unset"
        return f"Symbol({self.name!r}, depth={self.depth}, kind={kind})"

    def __str__(self):
        kind_str = self.kind.value if self.kind else "unset"
        if self.kind is None:
            return f"{self.name:<15} | {kind_str:<9} | {'':<9} | D{self.depth:<3} |"
        if self.kind is SymbolKind.FUNCTION:
            return (f"{self.name:<15} | {kind_str:<9} | {'':<9} | D{self.depth:<3} | "
                    f"{'':<6} | {'':<4} | {self.function.describe()}")
        return (f"{self.name:<15} | {kind_str:<9} | {self.value_type.value:<9} | D{self.depth:<3} | "
                f"{self.offset:<6} | {self.size:<4} | {self._storage().describe()}")


# --- 4. SymbolTable ---
class SymbolTable:
    """Depth-indexed symbol table.

    ``_symbols`` maps each name to its declarations ordered by depth, the
    innermost last. ``_names_by_depth`` remembers which names were declared
    at each depth so closing a scope only visits those names.
    """

    def __init__(self):
        self._symbols: dict[str, list[Symbol]] = {}
        self._names_by_depth: dict[int, list[str]] = {}
        self.current_depth = BASE_DEPTH

    def insert(self, name: str, depth: int) -> Symbol:
        symbol = Symbol(name, depth)
        self._symbols.setdefault(name, []).append(symbol)
        self._names_by_depth.setdefault(depth, []).append(name)
        return symbol

    def lookup(self, name: str, kind: SymbolKind | None = None) -> Symbol | None:
        for symbol in reversed(self._symbols.get(name, ())):
            if kind is None or symbol.kind is kind:
                return symbol
        return None

    def lookup_at_depth(self, name: str, depth: int) -> Symbol | None:
        for symbol in reversed(self._symbols.get(name, ())):
            if symbol.depth == depth:
                return symbol
        return None

    def delete_depth(self, depth: int):
        for name in self._names_by_depth.pop(depth, ()):
            declarations = self._symbols.get(name)
            if not declarations:
                continue
            declarations[:] = [symbol for symbol in declarations if symbol.depth != depth]
            if not declarations:
                del self._symbols[name]

    def entries(self, depth: int | None = None) -> list[Symbol]:
        """Symbols in declaration order, optionally only those at ``depth``."""
        depths = sorted(self._names_by_depth) if depth is None else [depth]
        result = []
        for d in depths:
            seen = set()
            for name in self._names_by_depth.get(d, ()):
                if name in seen:
                    continue
                seen.add(name)
                result.extend(s for s in self._symbols.get(name, ()) if s.depth == d)
        return result

    def __contains__(self, name: str) -> bool:
        return bool(self._symbols.get(name))

    def __len__(self) -> int:
        return sum(len(declarations) for declarations in self._symbols.values())
