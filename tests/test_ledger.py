import json
from dataclasses import replace

import pytest

from verifiable_tetris.game import MoveType
from verifiable_tetris.ledger import (
    CRC32,
    SHA256,
    LedgerFormatError,
    MoveLedger,
    VerificationResult,
    verify_records,
)
from verifiable_tetris.ledger import hashing


def _state(score: int = 0, lines: int = 0) -> dict:
    return {
        "board": [[0] * 4 for _ in range(4)],
        "current_piece": None,
        "next_piece": None,
        "score": score,
        "level": lines // 10 + 1,
        "lines": lines,
        "game_over": False,
    }


@pytest.fixture
def filled_ledger() -> MoveLedger:
    ledger = MoveLedger()
    for i in range(6):
        ledger.append(MoveType.SOFT_DROP, _state(score=i), _state(score=i + 1), timestamp=1000 + i)
    return ledger


def test_first_record_has_no_predecessor(ledger):
    record = ledger.append(MoveType.MOVE_LEFT, _state(), _state(), timestamp=5)
    assert record.move_index == 0
    assert record.previous_move_hash is None
    assert "previous_move_hash" not in record.content()
    assert record.hash_algorithm == SHA256
    assert len(record.hash) == 64
    assert record.move_type == "move_left"


def test_records_chain_to_predecessor(filled_ledger):
    records = filled_ledger.records
    for i in range(1, len(records)):
        assert records[i].move_index == i
        assert records[i].previous_move_hash == records[i - 1].hash
    assert filled_ledger.last_hash == records[-1].hash


def test_verify_one_after_append(ledger):
    record = ledger.append("rotate", _state(), _state(), timestamp=1)
    assert ledger.verify_one(record)


def test_editing_a_snapshot_breaks_verify_one(ledger):
    record = ledger.append("hard_drop", _state(score=10), _state(score=29), timestamp=1)
    record.after["score"] = 92
    assert not ledger.verify_one(record)


@pytest.mark.parametrize(
    "field, value",
    [("move_type", "move_right"), ("timestamp", 2), ("move_index", 3), ("hash", "0" * 64)],
)
def test_replacing_any_field_breaks_verify_one(ledger, field, value):
    record = ledger.append("move_left", _state(), _state(), timestamp=1)
    assert not ledger.verify_one(replace(record, **{field: value}))


def test_empty_ledger_is_valid(ledger):
    assert ledger.verify_all() == VerificationResult(valid=True)


def test_verify_all_is_idempotent(filled_ledger):
    first = filled_ledger.verify_all()
    assert first.valid
    assert filled_ledger.verify_all() == first


def test_tampered_record_is_reported_by_index(filled_ledger):
    filled_ledger.records[2].after["score"] = 999
    result = filled_ledger.verify_all()
    assert result == VerificationResult(valid=False, invalid_index=2, reason="hash mismatch")
    assert not result


@pytest.mark.parametrize("removed", [1, 2, 3, 4])
def test_splicing_out_a_record_breaks_the_chain(filled_ledger, removed):
    records = list(filled_ledger.records)
    del records[removed]
    result = verify_records(records)
    assert result == VerificationResult(valid=False, invalid_index=removed, reason="chain broken")


@pytest.mark.parametrize("first", [1, 2, 3])
def test_reordering_records_breaks_the_chain(filled_ledger, first):
    records = list(filled_ledger.records)
    records[first], records[first + 1] = records[first + 1], records[first]
    result = MoveLedger.from_records(records).verify_all()
    assert not result.valid
    assert result.invalid_index == first
    assert result.reason == "chain broken"


def test_export_reload_round_trip(filled_ledger):
    text = filled_ledger.export_snapshot()
    reloaded = MoveLedger.from_export(text)
    assert reloaded.records == filled_ledger.records
    assert reloaded.verify_all().valid


def test_export_is_ordered_list_of_records(filled_ledger):
    data = json.loads(filled_ledger.export_snapshot())
    assert [item["move_index"] for item in data] == list(range(6))
    assert "previous_move_hash" not in data[0]
    assert data[1]["previous_move_hash"] == data[0]["hash"]


def test_edited_export_fails_verification(filled_ledger):
    data = json.loads(filled_ledger.export_snapshot())
    data[3]["after"]["score"] += 1
    result = MoveLedger.from_export(json.dumps(data)).verify_all()
    assert result.invalid_index == 3


@pytest.mark.parametrize("text", ["not json", "{}", "[1, 2]", '[{"move_type": "rotate"}]'])
def test_malformed_export_raises(text):
    with pytest.raises(LedgerFormatError):
        MoveLedger.from_export(text)


def test_format_error_names_the_record():
    with pytest.raises(LedgerFormatError) as excinfo:
        MoveLedger.from_export('[{"move_type": "rotate"}]')
    assert excinfo.value.index == 0
    assert "record 0" in str(excinfo.value)


def test_clear(filled_ledger):
    filled_ledger.clear()
    assert len(filled_ledger) == 0
    assert filled_ledger.last_hash is None
    record = filled_ledger.append("rotate", _state(), _state(), timestamp=1)
    assert record.move_index == 0


def test_appended_states_are_copied(ledger):
    before = _state()
    record = ledger.append("rotate", before, _state(), timestamp=1)
    before["score"] = 77
    assert record.before["score"] == 0
    assert ledger.verify_one(record)


def test_unavailable_algorithm_falls_back_to_checksum():
    ledger = MoveLedger(algorithm="no-such-hash")
    first = ledger.append("rotate", _state(), _state(), timestamp=1)
    second = ledger.append("rotate", _state(), _state(), timestamp=2)
    assert first.hash_algorithm == CRC32
    assert len(first.hash) == 8
    assert ledger.verify_one(first)
    assert ledger.verify_all().valid
    assert second.previous_move_hash == first.hash


def test_fallback_when_hashlib_fails(monkeypatch, ledger):
    def broken(*args, **kwargs):
        raise ValueError("unsupported hash type")

    monkeypatch.setattr(hashing.hashlib, "new", broken)
    record = ledger.append("rotate", _state(), _state(), timestamp=1)
    assert record.hash_algorithm == CRC32
    assert ledger.verify_one(record)


def test_record_is_verified_with_its_own_algorithm():
    record = MoveLedger(algorithm="no-such-hash").append("rotate", _state(), _state(), timestamp=1)
    assert not MoveLedger().verify_one(replace(record, hash_algorithm=SHA256))
    assert not MoveLedger().verify_one(replace(record, hash_algorithm="no-such-hash"))


def test_canonical_serialization_ignores_key_order():
    assert hashing.digest({"a": 1, "b": [1, 2]}, SHA256) == hashing.digest({"b": [1, 2], "a": 1}, SHA256)
    assert hashing.digest({"a": 1}, SHA256) != hashing.digest({"a": 2}, SHA256)


def test_game_snapshot_is_recorded(game, clock, ledger):
    clock.advance(100)
    result = game.attempt_move(MoveType.HARD_DROP)
    assert result.record.after["board"] == [list(row) for row in game.get_snapshot().board]
    assert ledger.verify_all().valid
    reloaded = MoveLedger.from_export(ledger.export_snapshot())
    assert reloaded.verify_all().valid


def test_variable_length_digest_is_not_usable():
    assert not hashing.is_available("shake_128")
    assert hashing.resolve_algorithm("shake_128") == CRC32


def test_digest_failure_during_append_falls_back(monkeypatch, ledger):
    real_digest = hashing.digest

    def sha256_fails(data, algorithm):
        if algorithm == SHA256:
            raise ValueError("digest unsupported")
        return real_digest(data, algorithm)

    monkeypatch.setattr(hashing, "digest", sha256_fails)
    record = ledger.append("rotate", _state(), _state(), timestamp=1)
    assert record.hash_algorithm == CRC32
    assert len(record.hash) == 8
    monkeypatch.undo()
    assert ledger.verify_one(record)


@pytest.mark.parametrize(
    "field, value",
    [
        ("before", 1),
        ("after", [1, 2]),
        ("timestamp", "1000"),
        ("move_index", 1.5),
        ("move_index", True),
        ("hash", 5),
        ("previous_move_hash", 7),
    ],
)
def test_export_with_wrong_field_type_raises(filled_ledger, field, value):
    data = json.loads(filled_ledger.export_snapshot())
    data[2][field] = value
    with pytest.raises(LedgerFormatError) as excinfo:
        MoveLedger.from_export(json.dumps(data))
    assert excinfo.value.index == 2


def test_chain_with_head_cut_off_still_links(filled_ledger):
    records = filled_ledger.records[2:]
    assert verify_records(records).valid
