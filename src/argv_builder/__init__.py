"""argv-builder - Process argument lists with secret masking and cmd.exe escaping."""

__version__ = "0.1.0"

from .builder import Argument, ArgumentBuilder
from .core import build_arguments, dry_run, load_spec
from .macro_engine import MacroEngine
from .models import ArgumentEntry, CommandSpec, Provider
from .properties import ParseError, PropertyParser, parse_properties
from .tokenizer import tokenize
from .types import IdentityResolver, MacroResolver
from .windows import escape_windows_argument, to_windows_command

__all__ = [
    "Argument",
    "ArgumentBuilder",
    "ArgumentEntry",
    "CommandSpec",
    "IdentityResolver",
    "MacroEngine",
    "MacroResolver",
    "ParseError",
    "PropertyParser",
    "Provider",
    "build_arguments",
    "dry_run",
    "escape_windows_argument",
    "load_spec",
    "parse_properties",
    "to_windows_command",
    "tokenize",
]
