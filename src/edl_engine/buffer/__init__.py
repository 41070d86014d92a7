"""Document model, coordinate remapping, registers, and storage access."""

from .document import Document, DocumentRangeError
from .file_io import FileIO, FsFileIO, InMemoryFileIO
from .registers import EdlRegisters, MissingRegisterError, RegisterBank
from .state import Pos, Range
from .transforms import (
    InitialDocIndex,
    Transform,
    UnresolvablePositionError,
    resolve_index,
    resolve_range,
)

__all__ = [
    "Document",
    "DocumentRangeError",
    "EdlRegisters",
    "FileIO",
    "FsFileIO",
    "InMemoryFileIO",
    "InitialDocIndex",
    "MissingRegisterError",
    "Pos",
    "Range",
    "RegisterBank",
    "Transform",
    "UnresolvablePositionError",
    "resolve_index",
    "resolve_range",
]
