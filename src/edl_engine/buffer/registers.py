"""Named text registers and their cross-invocation snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Mapping, Optional

SAVED_PREFIX = "_saved_"


class MissingRegisterError(KeyError):
    """Raised when a mutation references a register that was never set."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f'Register "{self.name}" does not exist'


@dataclass(slots=True)
class EdlRegisters:
    """Registers plus the id the next ``_saved_N`` register will receive.

    Callers treat this as opaque: keep the one returned by a run and pass it
    to the next run that should see the same registers.
    """

    registers: Dict[str, str] = field(default_factory=dict)
    next_saved_id: int = 1

    def to_dict(self) -> Dict[str, object]:
        return {"registers": dict(self.registers), "next_saved_id": self.next_saved_id}

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "EdlRegisters":
        raw = data.get("registers") or {}
        if not isinstance(raw, Mapping):
            raise TypeError("'registers' must be a mapping of name to text")
        next_id = data.get("next_saved_id", 1)
        return cls(
            registers={str(k): str(v) for k, v in raw.items()},
            next_saved_id=int(next_id),  # type: ignore[arg-type]
        )


class RegisterBank:
    """Tracks user-named registers and engine-assigned ``_saved_N`` ones."""

    def __init__(self, snapshot: Optional[EdlRegisters] = None) -> None:
        self._registers: Dict[str, str] = {}
        self._next_saved_id = 1
        if snapshot is not None:
            self.load(snapshot)

    def __contains__(self, name: object) -> bool:
        return name in self._registers

    def __iter__(self) -> Iterator[str]:
        return iter(self._registers)

    def __len__(self) -> int:
        return len(self._registers)

    def get(self, name: str) -> str:
        try:
            return self._registers[name]
        except KeyError as exc:
            raise MissingRegisterError(name) from exc

    def set(self, name: str, text: str) -> None:
        self._registers[name] = text

    def allocate_saved(self, text: str) -> str:
        """Store ``text`` under a fresh ``_saved_N`` name and return it."""

        while f"{SAVED_PREFIX}{self._next_saved_id}" in self._registers:
            self._next_saved_id += 1
        name = f"{SAVED_PREFIX}{self._next_saved_id}"
        self._next_saved_id += 1
        self._registers[name] = text
        return name

    @property
    def next_saved_id(self) -> int:
        return self._next_saved_id

    def load(self, snapshot: EdlRegisters) -> None:
        self._registers.update(snapshot.registers)
        self._next_saved_id = max(self._next_saved_id, snapshot.next_saved_id)

    def serialize(self) -> EdlRegisters:
        return EdlRegisters(
            registers=dict(self._registers), next_saved_id=self._next_saved_id
        )


__all__ = ["EdlRegisters", "MissingRegisterError", "RegisterBank", "SAVED_PREFIX"]
