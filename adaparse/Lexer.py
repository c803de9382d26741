import re
from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    PROCEDURE = "procedure"; IS = "is"; BEGIN = "begin"; END = "end"
    INTEGER = "integer"; FLOAT = "float"; CHAR = "char"; CONSTANT = "const"
    IN = "in"; OUT = "out"; INOUT = "inout"; NOT = "not"
    id = "identifier"; num = "number"
    assignop = ":="; addop = "addop"; mulop = "mulop"; relop = "relop"
    lparen = "("; rparen = ")"; semicolon = ";"; colon = ":"; comma = ","
    eof = "end of file"

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Token:
    kind: TokenType
    lexeme: str
    line: int

    def __repr__(self):
        return f"Token({self.kind.name}, {self.lexeme!r}, line={self.line})"

    def __str__(self):
        return f"({self.kind}, {self.lexeme})"


class LexicalError(Exception):
    def __init__(self, char, line):
        super().__init__(f"Lexical error: unknown character {char!r} at line number {line}")
        self.char = char
        self.line = line


# Reserved words, matched case-insensitively. The value is the token kind
# an identifier-shaped lexeme is reclassified to.
KEYWORDS = {
    "procedure": TokenType.PROCEDURE, "is": TokenType.IS,
    "begin": TokenType.BEGIN, "end": TokenType.END,
    "integer": TokenType.INTEGER, "float": TokenType.FLOAT, "char": TokenType.CHAR,
    "const": TokenType.CONSTANT, "constant": TokenType.CONSTANT,
    "in": TokenType.IN, "out": TokenType.OUT, "inout": TokenType.INOUT,
    "not": TokenType.NOT,
    "or": TokenType.addop,
    "and": TokenType.mulop, "mod": TokenType.mulop, "rem": TokenType.mulop,
}


class Lexer:
    """Turns source text into :class:`Token` objects.

    Tokens can be produced all at once with :meth:`tokenize` or pulled one
    at a time with :meth:`get_next_token`, which is the interface the
    analyzer reads from. Both end with an ``eof`` token; pulling past the
    end keeps returning it.
    """

    def __init__(self, source_code):
        self.source = source_code
        self.pos = 0
        self.line = 1
        self._eof_token = None

        # (kind, regex). Order matters: longer
        # operators come before their one-character prefixes.
        token_specifications = [
            (TokenType.num,       r'[0-9]+(\.[0-9]+)?'),
            (TokenType.id,        r'[a-zA-Z][a-zA-Z0-9_]*'),
            (TokenType.assignop,  r':='),
            (TokenType.relop,     r'<=|>=|/=|<|>|='),
            (TokenType.colon,     r':'),
            (TokenType.addop,     r'[+\-]'),
            (TokenType.mulop,     r'[*/]'),
            (TokenType.lparen,    r'\('),
            (TokenType.rparen,    r'\)'),
            (TokenType.semicolon, r';'),
            (TokenType.comma,     r','),
        ]

        self.compiled_regex_rules = [(kind, re.compile(pattern_str))
                                     for kind, pattern_str in token_specifications]

        self._stream = self._scan()

    def _skip_whitespace_and_comments(self):
        while self.pos < len(self.source):
            current_char = self.source[self.pos]
            if current_char == "\n":
                self.line += 1
                self.pos += 1
            elif current_char.isspace():
                self.pos += 1
            elif self.source.startswith("--", self.pos):
                end_of_line = self.source.find("\n", self.pos)
                self.pos = len(self.source) if end_of_line == -1 else end_of_line
            else:
                break

    def _scan(self):
        while True:
            self._skip_whitespace_and_comments()
            if self.pos >= len(self.source):
                break

            for kind, regex_obj in self.compiled_regex_rules:
                match = regex_obj.match(self.source, self.pos)
                if match:
                    lexeme = match.group(0)
                    if kind is TokenType.id:
                        kind = KEYWORDS.get(lexeme.lower(), TokenType.id)
                    self.pos += len(lexeme)
                    yield Token(kind, lexeme, self.line)
                    break
            else:
                raise LexicalError(self.source[self.pos], self.line)

        self._eof_token = Token(TokenType.eof, "EOF", self.line)
        yield self._eof_token

    def get_next_token(self):
        if self._eof_token is not None:
            return self._eof_token
        return next(self._stream)

    def tokenize(self):
        tokens = []
        while True:
            token = self.get_next_token()
            tokens.append(token)
            if token.kind is TokenType.eof:
                return tokens


class ListTokenSource:
    """Token source over an already built list of tokens."""

    def __init__(self, tokens):
        self.tokens = list(tokens)
        self.pos = 0
        last_line = self.tokens[-1].line if self.tokens else 1
        self._eof_token = Token(TokenType.eof, "EOF", last_line)

    def get_next_token(self):
        if self.pos < len(self.tokens):
            token = self.tokens[self.pos]
            self.pos += 1
            return token
        return self._eof_token
