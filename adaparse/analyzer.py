"""Single-pass recursive-descent analyzer for the Ada-like procedure language.

Grammar handled by :class:`Analyzer` (one method per nonterminal)::

    Prog            -> procedure idt Args is DeclarativePart Procedures
                       begin SeqOfStatements end idt ;
    DeclarativePart -> IdentifierList : TypeMark ; DeclarativePart | e
    IdentifierList  -> idt { , idt }
    TypeMark        -> integert | realt | chart | const assignop Value
    Value           -> NumericalLiteral
    Procedures      -> Prog Procedures | e
    Args            -> ( ArgList ) | e
    ArgList         -> Mode IdentifierList : TypeMark { ; ArgList }
    Mode            -> in | out | inout | e
    SeqOfStatements -> { Statement ; }
    Statement       -> AssignStat | IOStat
    AssignStat      -> idt := Expr
    IOStat          -> e
    Expr            -> Relation
    Relation        -> SimpleExpr
    SimpleExpr      -> Term { Addop Term }
    Term            -> Factor { Mulop Factor }
    Factor          -> id | num | ( Expr ) | not Factor | - Factor

Symbol-table bookkeeping happens while parsing: names are declared as they
are read, attributed once their TypeMark is known, and every procedure
body is a new scope that is deleted again when the procedure ends.
"""
import sys
from argparse import ArgumentParser, FileType
from contextlib import contextmanager

from .Lexer import Lexer, LexicalError, TokenType
from .symtab import ParamMode, Symbol, SymbolKind, SymbolTable, VarType

# Activation record layout.
HEADER_SIZE = 4          # parameters start above the fixed header
LOCAL_BASE_OFFSET = 2    # first local variable offset

NO_ERRORS = "No errors reported."

_PRIMITIVE_TYPES = {
    TokenType.INTEGER: VarType.INTEGER,
    TokenType.FLOAT: VarType.FLOAT,
    TokenType.CHAR: VarType.CHARACTER,
}

_MODES = {"in": ParamMode.IN, "out": ParamMode.OUT, "inout": ParamMode.INOUT}


# --- 1. Errors ---
class AnalysisError(Exception):
    def __init__(self, message: str, line: int):
        super().__init__(message)
        self.line = line


class UnexpectedTokenError(AnalysisError):
    def __init__(self, line: int, expected, found: TokenType, lexeme: str):
        super().__init__(f"At line number {line}, expecting {expected} token, "
                         f"but found {found} token with lexeme {lexeme}", line)
        self.expected = expected; self.found = found; self.lexeme = lexeme


class DuplicateSymbolError(AnalysisError):
    def __init__(self, name: str, line: int):
        super().__init__(f"Error: Duplicate symbol: '{name}' at line number {line}", line)
        self.name = name


class UndefinedIdentifierError(AnalysisError):
    def __init__(self, name: str, line: int):
        super().__init__(f"Error: Undefined identifier {name} at line number {line}", line)
        self.name = name


class MismatchedProcedureNameError(AnalysisError):
    def __init__(self, name: str, line: int):
        super().__init__(f'Error : Missing statement "END {name};"', line)
        self.name = name


class UnconsumedInputError(AnalysisError):
    def __init__(self, line: int, found: TokenType, lexeme: str):
        super().__init__(f"At line number {line} unused token({found}, {lexeme}) found. "
                         f"Expecting End of File token.", line)
        self.found = found; self.lexeme = lexeme


# --- 2. Analyzer ---
class Analyzer:
    """Parses one token stream and fills a :class:`SymbolTable` on the way.

    ``token_source`` is anything with a ``get_next_token()`` method that
    keeps returning an ``eof`` token once exhausted. An instance runs a
    single analysis; the first error raises an :class:`AnalysisError`
    subclass and nothing after it is parsed.
    """

    def __init__(self, token_source, trace_to_console: bool = False):
        self.tokenizer = token_source
        self.trace_to_console = trace_to_console
        self.symbol_table = SymbolTable()
        self.current_token = None
        self.is_parsing_successful = False
        self.listing: list[str] = []

        # Symbols read by IdentifierList that still wait for their TypeMark.
        self.pending_identifiers: list[Symbol] = []
        # How many of the pending parameters were already added to the
        # procedure's parameter lists.
        self._parameters_recorded = 0
        self._identifier_offset = LOCAL_BASE_OFFSET

    def analyze(self) -> SymbolTable:
        if self.current_token is not None:
            raise RuntimeError("an Analyzer instance can only run once")
        self.listing.append("--- Begin analysis ---")
        self.current_token = self.tokenizer.get_next_token()

        self.program()

        if self.current_token.kind is not TokenType.eof:
            raise UnconsumedInputError(self.current_token.line, self.current_token.kind,
                                       self.current_token.lexeme)
        self.is_parsing_successful = True
        self._add_symbol_table_snapshot_to_listing(self.symbol_table.current_depth, "Global scope")
        self.listing.append("--- Analysis completed without errors ---")
        return self.symbol_table

    # Prog -> procedure idt Args is DeclarativePart Procedures begin SeqOfStatements end idt ;
    def program(self):
        self.match(TokenType.PROCEDURE)
        name_token = self.current_token
        self.match(TokenType.id)
        function_name = name_token.lexeme
        self._check_for_duplicate_symbol(name_token)
        function_symbol = self.symbol_table.insert(function_name, self.symbol_table.current_depth)
        function_symbol.set_kind(SymbolKind.FUNCTION)
        self.listing.append(f"Declared procedure: {function_name} (depth {function_symbol.depth})")

        with self._scope(function_name):
            self.args(function_name)
            self.match(TokenType.IS)
            self._identifier_offset = LOCAL_BASE_OFFSET
            self.declarative_part(function_name)
            self.procedures()
            self.match(TokenType.BEGIN)
            self.seq_of_statements()
            self.match(TokenType.END)
            if self.current_token.lexeme.lower() != function_name.lower():
                raise MismatchedProcedureNameError(function_name, self.current_token.line)
            self.match(TokenType.id)
            self.match(TokenType.semicolon)

    @contextmanager
    def _scope(self, function_name: str):
        table = self.symbol_table
        table.current_depth += 1
        depth = table.current_depth
        self.listing.append(f"Entering procedure '{function_name}' scope (depth {depth})")
        try:
            yield
            self._add_symbol_table_snapshot_to_listing(depth, f"Procedure {function_name}")
        finally:
            table.delete_depth(depth)
            table.current_depth = depth - 1
        self.listing.append(f"Leaving procedure '{function_name}' scope (back to depth {depth - 1})")

    # DeclarativePart -> IdentifierList : TypeMark ; DeclarativePart | e
    def declarative_part(self, function_name: str):
        while self.current_token.kind is TokenType.id:
            self.identifier_list()
            self.match(TokenType.colon)
            self.type_mark(function_name, None)
            self.match(TokenType.semicolon)

    # IdentifierList -> idt { , idt }
    def identifier_list(self):
        self._declare_pending_identifier()
        while self.current_token.kind is TokenType.comma:
            self.match(TokenType.comma)
            self._declare_pending_identifier()

    def _declare_pending_identifier(self):
        token = self.current_token
        self.match(TokenType.id)
        self._check_for_duplicate_symbol(token)
        self.pending_identifiers.append(self.symbol_table.insert(token.lexeme, self.symbol_table.current_depth))

    # TypeMark -> integert | realt | chart | const assignop Value
    def type_mark(self, function_name: str, parameter_mode: ParamMode | None):
        token = self.current_token
        if token.kind in _PRIMITIVE_TYPES:
            variable_type = _PRIMITIVE_TYPES[token.kind]
            for symbol in self.pending_identifiers:
                if symbol.kind is None:
                    symbol.set_kind(SymbolKind.VARIABLE)
                    symbol.variable.type_of_variable = variable_type
                    symbol.variable.size = variable_type.size
            self.match(token.kind)
        elif token.kind is TokenType.CONSTANT:
            self.match(TokenType.CONSTANT)
            self.match(TokenType.assignop)
            number_text = self.value()
            if "." in number_text:
                constant_type, constant_value = VarType.FLOAT, float(number_text)
            else:
                constant_type, constant_value = VarType.INTEGER, int(number_text)
            for symbol in self.pending_identifiers:
                if symbol.kind is None:
                    symbol.set_kind(SymbolKind.CONSTANT)
                    symbol.constant.type_of_constant = constant_type
                    symbol.constant.value = constant_value
                    symbol.constant.size = constant_type.size
        else:
            raise UnexpectedTokenError(token.line, "integer/float/char/const", token.kind, token.lexeme)

        function = self.symbol_table.lookup(function_name, SymbolKind.FUNCTION).function
        if parameter_mode is not None:
            for symbol in self.pending_identifiers[self._parameters_recorded:]:
                function.parameter_types.append(symbol.value_type)
                function.parameter_modes.append(parameter_mode)
                symbol.is_parameter = True
            self._parameters_recorded = len(self.pending_identifiers)
        else:
            for symbol in self.pending_identifiers:
                symbol.offset = self._identifier_offset
                self._identifier_offset += symbol.size
                self._record_declaration(symbol)
            function.size_of_local_variables = self._identifier_offset - LOCAL_BASE_OFFSET
            self.pending_identifiers.clear()

    # Value -> NumericalLiteral
    def value(self) -> str:
        lexeme = self.current_token.lexeme
        self.match(TokenType.num)
        return lexeme

    # Procedures -> Prog Procedures | e
    def procedures(self):
        while self.current_token.kind is TokenType.PROCEDURE:
            self.program()

    # Args -> ( ArgList ) | e
    def args(self, function_name: str):
        if self.current_token.kind is not TokenType.lparen:
            return
        self.match(TokenType.lparen)
        self._parameters_recorded = 0
        self.arg_list(function_name)
        self.match(TokenType.rparen)

        # Last parameter sits right above the header, the first one highest.
        offset = HEADER_SIZE
        for symbol in reversed(self.pending_identifiers):
            symbol.offset = offset
            offset += symbol.size

        function = self.symbol_table.lookup(function_name, SymbolKind.FUNCTION).function
        function.number_of_parameters = len(self.pending_identifiers)
        function.size_of_parameters = offset - HEADER_SIZE
        for symbol in self.pending_identifiers:
            self._record_declaration(symbol)
        self.pending_identifiers.clear()

    # ArgList -> Mode IdentifierList : TypeMark MoreArgs
    # MoreArgs -> ; ArgList | e
    def arg_list(self, function_name: str):
        while True:
            parameter_mode = self.mode()
            self.identifier_list()
            self.match(TokenType.colon)
            self.type_mark(function_name, parameter_mode)
            if self.current_token.kind is not TokenType.semicolon:
                break
            self.match(TokenType.semicolon)

    # Mode -> in | out | inout | e
    def mode(self) -> ParamMode:
        parameter_mode = _MODES.get(self.current_token.lexeme.lower())
        if parameter_mode is None:
            return ParamMode.IN
        self.match(self.current_token.kind)
        return parameter_mode

    # Only assignments are recognised as statements, and they all start with an identifier.
    # SeqOfStatements -> Statement ; StatTail | e
    def seq_of_statements(self):
        while self.current_token.kind is TokenType.id:
            self.statement()
            self.match(TokenType.semicolon)

    # Statement -> AssignStat | IOStat
    def statement(self):
        if self.current_token.kind is TokenType.id:
            self.assign_stat()
        else:
            self.io_stat()

    # AssignStat -> idt := Expr
    def assign_stat(self):
        self._check_defined(self.current_token)
        self.match(TokenType.id)
        self.match(TokenType.assignop)
        self.expr()

    # IOStat -> e
    def io_stat(self):
        return

    # Expr -> Relation
    def expr(self):
        self.relation()

    # Relation -> SimpleExpr
    def relation(self):
        self.simple_expr()

    # SimpleExpr -> Term MoreTerm
    def simple_expr(self):
        self.term()
        while self.current_token.kind is TokenType.addop:
            self.match(TokenType.addop)
            self.term()

    # Term -> Factor MoreFactor
    def term(self):
        self.factor()
        while self.current_token.kind is TokenType.mulop:
            self.match(TokenType.mulop)
            self.factor()

    # Factor -> id | num | ( Expr ) | not Factor | SignOp Factor
    def factor(self):
        token = self.current_token
        if token.kind is TokenType.id:
            self._check_defined(token)
            self.match(TokenType.id)
        elif token.kind is TokenType.num:
            self.match(TokenType.num)
        elif token.kind is TokenType.lparen:
            self.match(TokenType.lparen)
            self.expr()
            self.match(TokenType.rparen)
        elif token.kind is TokenType.NOT:
            self.match(TokenType.NOT)
            self.factor()
        elif token.kind is TokenType.addop and token.lexeme == "-":
            self.match(TokenType.addop)
            self.factor()
        else:
            raise UnexpectedTokenError(token.line, "factor", token.kind, token.lexeme)

    def match(self, desired_token: TokenType):
        """Advance past the current token if it is of kind ``desired_token``.

        This is the only place the analyzer reads from the token source.
        """
        token = self.current_token
        if token.kind is not desired_token:
            raise UnexpectedTokenError(token.line, desired_token, token.kind, token.lexeme)
        self.current_token = self.tokenizer.get_next_token()

    def _check_for_duplicate_symbol(self, token):
        table = self.symbol_table
        if table.lookup_at_depth(token.lexeme, table.current_depth) is not None:
            raise DuplicateSymbolError(token.lexeme, token.line)

    def _check_defined(self, token):
        symbol = self.symbol_table.lookup(token.lexeme)
        if symbol is None or symbol.depth > self.symbol_table.current_depth:
            raise UndefinedIdentifierError(token.lexeme, token.line)

    def _record_declaration(self, symbol: Symbol):
        role = "parameter" if symbol.is_parameter else symbol.kind.value
        self.listing.append(f"  Declared {role}: {symbol}")

    def _add_symbol_table_snapshot_to_listing(self, depth: int, title: str):
        lines = [f"--- {title} (depth {depth}) ---"]
        symbols = self.symbol_table.entries(depth)
        if not symbols:
            lines.append("  <empty>")
        for symbol in symbols:
            lines.append(f"  {symbol}")
        lines.append(f"--- End of {title} ---")
        self.listing.extend(lines)
        if self.trace_to_console:
            print("\n".join(lines))


# --- 3. Top-level functions ---
def analyze_source(source_code: str, trace_to_console: bool = False) -> SymbolTable:
    return Analyzer(Lexer(source_code), trace_to_console=trace_to_console).analyze()


def format_symbol_table(symbols) -> str:
    header = (f"{'Name':<15} | {'Kind':<9} | {'Type':<9} | {'Depth':<4} | "
              f"{'Offset':<6} | {'Size':<4} | Details")
    lines = [header, "-" * len(header)]
    lines.extend(str(symbol) for symbol in symbols)
    return "\n".join(lines)


def perform_semantic_analysis_from_source(source_code: str, trace_to_console: bool = False
                                          ) -> tuple[str, str, list[str]]:
    """Run the whole pipeline and return (symbol table text, error text, listing)."""
    analyzer = Analyzer(Lexer(source_code), trace_to_console=trace_to_console)
    try:
        symbol_table = analyzer.analyze()
    except (AnalysisError, LexicalError) as e:
        analyzer.listing.append(f"Analysis stopped: {e}")
        return "No symbol table (analysis failed).", str(e), analyzer.listing
    return format_symbol_table(symbol_table.entries()), NO_ERRORS, analyzer.listing


def _build_argument_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog='adaparse',
        description='Parse a procedure source file and build its symbol table.',
        )
    parser.add_argument(
        'source',
        nargs='?',
        type=FileType('r'),
        default='-',
        )
    parser.add_argument(
        '-t', '--trace',
        action='store_true',
        help='print symbol table snapshots while analysing',
        )
    parser.add_argument(
        '-l', '--listing',
        type=FileType('w'),
        help='write the analysis listing to this file',
        )
    parser.add_argument(
        '--tokens',
        action='store_true',
        help='print the token stream instead of analysing',
        )
    return parser


def main_compiler_pipeline_cli(argv=None) -> int:
    args = _build_argument_parser().parse_args(argv)
    source_code = args.source.read()
    if args.source is not sys.stdin:
        args.source.close()

    if args.tokens:
        try:
            tokens = Lexer(source_code).tokenize()
        except LexicalError as e:
            print(e)
            return 1
        for token in tokens:
            print(token)
        return 0

    analyzer = Analyzer(Lexer(source_code), trace_to_console=args.trace)
    try:
        symbol_table = analyzer.analyze()
    except (AnalysisError, LexicalError) as e:
        print(e)
        analyzer.listing.append(f"Analysis stopped: {e}")
        status = 1
    else:
        print(format_symbol_table(symbol_table.entries()))
        status = 0

    if args.listing:
        with args.listing:
            for line in analyzer.listing:
                args.listing.write(line + "\n")
    return status


if __name__ == "__main__":
    sys.exit(main_compiler_pipeline_cli())
