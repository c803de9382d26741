from .Lexer import Lexer, ListTokenSource, LexicalError, Token, TokenType
from .symtab import ParamMode, Symbol, SymbolKind, SymbolTable, VarType
from .analyzer import (
    AnalysisError, Analyzer, DuplicateSymbolError, MismatchedProcedureNameError,
    UnconsumedInputError, UndefinedIdentifierError, UnexpectedTokenError,
    analyze_source, perform_semantic_analysis_from_source,
)
