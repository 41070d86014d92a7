"""EDL lexer, parser, and the command/pattern models they produce."""

from .lexer import Lexer, ParseError, lex
from .models import (
    BofPattern,
    Command,
    CutCommand,
    DeleteCommand,
    EofPattern,
    FileCommand,
    LineColPattern,
    LinePattern,
    LiteralPattern,
    MutationText,
    NewFileCommand,
    Pattern,
    PatternCommand,
    RangePattern,
    RegexPattern,
    RetainCommand,
    TextCommand,
    describe_command,
)
from .parser import COMMAND_KEYWORDS, parse

__all__ = [
    "BofPattern",
    "COMMAND_KEYWORDS",
    "Command",
    "CutCommand",
    "DeleteCommand",
    "EofPattern",
    "FileCommand",
    "Lexer",
    "LineColPattern",
    "LinePattern",
    "LiteralPattern",
    "MutationText",
    "NewFileCommand",
    "ParseError",
    "Pattern",
    "PatternCommand",
    "RangePattern",
    "RegexPattern",
    "RetainCommand",
    "TextCommand",
    "describe_command",
    "lex",
    "parse",
]
