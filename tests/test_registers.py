import pytest

from edl_engine.buffer import EdlRegisters, MissingRegisterError, RegisterBank


def test_missing_register_message() -> None:
    bank = RegisterBank()

    with pytest.raises(MissingRegisterError) as excinfo:
        bank.get("nope")

    assert str(excinfo.value) == 'Register "nope" does not exist'


def test_allocate_saved_uses_increasing_ids() -> None:
    bank = RegisterBank()

    assert bank.allocate_saved("one") == "_saved_1"
    assert bank.allocate_saved("two") == "_saved_2"
    assert bank.get("_saved_2") == "two"
    assert bank.next_saved_id == 3


def test_allocate_saved_skips_names_already_taken() -> None:
    bank = RegisterBank()
    bank.set("_saved_1", "user text")

    assert bank.allocate_saved("auto") == "_saved_2"
    assert bank.get("_saved_1") == "user text"


def test_snapshot_continues_counter() -> None:
    first = RegisterBank()
    first.set("clip", "abc")
    first.allocate_saved("x")

    second = RegisterBank(first.serialize())

    assert second.get("clip") == "abc"
    assert second.allocate_saved("y") == "_saved_2"
    assert sorted(second) == ["_saved_1", "_saved_2", "clip"]


def test_edl_registers_dict_round_trip() -> None:
    snapshot = EdlRegisters(registers={"a": "text"}, next_saved_id=4)

    restored = EdlRegisters.from_dict(snapshot.to_dict())

    assert restored == snapshot
    assert EdlRegisters.from_dict({}) == EdlRegisters()


def test_edl_registers_rejects_non_mapping() -> None:
    with pytest.raises(TypeError):
        EdlRegisters.from_dict({"registers": ["a"]})
