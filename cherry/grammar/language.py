"""
The Cherry language: its terminal alphabet and production rules.

Nothing here is a module-level singleton. `build_terminal_table()` and
`build_cherry_grammar()` construct fresh, immutable objects; the compiler
startup calls them once and passes the results to whatever needs them.

Grammar (ε is the empty derivation):

    <document>  ::= <start>
    <start>     ::= <directive> <start> | <packaging> <start> | ε
    <directive> ::= "use" <type-name> ";"
    <packaging> ::= "namespace" <type-name> ";"
    <type-name> ::= "id" | <type-name> "." "id"
"""

from typing import Optional

from .grammar import Grammar, GrammarBuilder
from .symbols import TerminalKind, TerminalTable

_L = TerminalKind.LITERAL
_K = TerminalKind.KEYWORD
_S = TerminalKind.SYMBOL
_X = TerminalKind.SPECIAL

# (name, canonical lexeme, kind), in index order.
CHERRY_TERMINALS = (
    # Identifier and literal classes
    ("ID", "id", _L),
    ("REAL", "real", _L),         # plain (decimal integer) number
    ("HEX", "hex", _L),           # 0x1F
    ("OCT", "oct", _L),           # 0755
    ("BIN", "bin", _L),           # 0b101
    ("DEC", "dec", _L),           # number with a fractional part, 3.14
    ("WIDE", "wide", _L),         # 8-byte number, 123L
    ("SKINNY", "skinny", _L),     # 2-byte number, 12S
    ("STRL", "strl", _L),         # "text"
    ("CHRL", "chrl", _L),         # 'c'
    ("UNDEF", "undef", _X),
    ("EOTS", "$", _X),
    ("EPSILON", "ε", _X),

    # Statements
    ("IF", "if", _K),
    ("ELSE", "else", _K),
    ("FOR", "for", _K),
    ("WHILE", "while", _K),
    ("FOREACH", "foreach", _K),
    ("SWITCH", "switch", _K),
    ("CASE", "case", _K),
    ("DO", "do", _K),
    ("RETURN", "return", _K),
    ("CONTINUE", "continue", _K),
    ("SKIP", "skip", _K),
    ("BREAK", "break", _K),

    # Types and subtypes
    ("BYTE", "byte", _K),
    ("BOOL", "bool", _K),
    ("INT", "int", _K),
    ("FLOAT", "float", _K),
    ("DOUBLE", "double", _K),
    ("STRING", "string", _K),
    ("CHAR", "char", _K),
    ("VOID", "void", _K),
    ("SHORT", "short", _K),
    ("LONG", "long", _K),
    ("PTR", "ptr", _K),
    ("REF", "ref", _K),
    ("THREAD", "thread", _K),

    # Objects and packaging
    ("CLASS", "class", _K),
    ("STRUCT", "struct", _K),
    ("ENUM", "enum", _K),
    ("INTERFACE", "interface", _K),
    ("NAMESPACE", "namespace", _K),
    ("USE", "use", _K),

    # Accessors and modifiers
    ("GLOBAL", "global", _K),
    ("EXTERNAL", "external", _K),
    ("LOCAL", "local", _K),
    ("INTERNAL", "internal", _K),
    ("SECURE", "secure", _K),
    ("STATIC", "static", _K),
    ("CONST", "const", _K),
    ("IMMUTABLE", "immutable", _K),
    ("FINAL", "final", _K),
    ("ABSTRACT", "abstract", _K),
    ("OVERRIDE", "override", _K),
    ("NEW", "new", _K),
    ("THIS", "this", _K),
    ("SUPER", "super", _K),
    ("IN", "in", _K),

    # Arithmetic
    ("ADD", "+", _S),
    ("SUB", "-", _S),
    ("MUL", "*", _S),
    ("DIV", "/", _S),
    ("MOD", "%", _S),
    ("INC", "++", _S),
    ("DCM", "--", _S),
    ("ADDEQ", "+=", _S),
    ("SUBEQ", "-=", _S),
    ("MULEQ", "*=", _S),
    ("DIVEQ", "/=", _S),
    ("MODEQ", "%=", _S),

    # Comparison and logic
    ("NOT", "!", _S),
    ("NOTEQ", "!=", _S),
    ("ASG", "=", _S),
    ("LEQ", "==", _S),
    ("LESS", "<", _S),
    ("MORE", ">", _S),
    ("LESSEQ", "<=", _S),
    ("MOREQ", ">=", _S),
    ("AND", "&&", _S),
    ("OR", "||", _S),

    # Bitwise
    ("LSH", "<<", _S),
    ("RSH", ">>", _S),
    ("LSHEQ", "<<=", _S),
    ("RSHEQ", ">>=", _S),
    ("LLSH", "<<<", _S),
    ("LRSH", ">>>", _S),
    ("BWA", "&", _S),
    ("BWO", "|", _S),
    ("BWAEQ", "&=", _S),
    ("BWOEQ", "|=", _S),
    ("BWX", "^", _S),
    ("BWXEQ", "^=", _S),
    ("BWN", "~", _S),

    # Punctuation
    ("DOT", ".", _S),
    ("ELL", "...", _S),
    ("COL", ":", _S),
    ("SRO", "::", _S),
    ("LBRC", "{", _S),
    ("RBRC", "}", _S),
    ("LBRK", "[", _S),
    ("RBRK", "]", _S),
    ("LPAR", "(", _S),
    ("RPAR", ")", _S),
    ("SMC", ";", _S),
    ("TERN", "?", _S),
    ("COA", "??", _S),
    ("COM", ",", _S),
)


def build_terminal_table() -> TerminalTable:
    return TerminalTable(CHERRY_TERMINALS)


def build_cherry_grammar(terminals: Optional[TerminalTable] = None) -> Grammar:
    """Build the Cherry grammar over `terminals` (a fresh Cherry table by default)."""
    if terminals is None:
        terminals = build_terminal_table()

    builder = GrammarBuilder(terminals)
    document, start, directive, packaging, type_name = builder.nonterminals(
        "DOCUMENT", "START", "DIRECTIVE", "PACKAGING", "TYPE_NAME"
    )
    t = terminals.lookup

    builder.define_rule(document, [
        [start],
    ])
    builder.define_rule(start, [
        [directive, start],
        [packaging, start],
        [t("EPSILON")],
    ])
    builder.define_rule(directive, [
        [t("USE"), type_name, t("SMC")],
    ])
    builder.define_rule(packaging, [
        [t("NAMESPACE"), type_name, t("SMC")],
    ])
    builder.define_rule(type_name, [
        [t("ID")],
        [type_name, t("DOT"), t("ID")],
    ])

    return builder.build(start=document)
