"""
Execution strategy tests against a recording execution unit.
"""
import pytest

from querybind.binding import BindingSpec, GeneratedKeys, ReturnShape
from querybind.errors import BatchShapeError, BindingError, ExecutionError
from querybind.execution import (
    ExecutionState,
    ExecutionStrategy,
    ReturnedKeys,
    RowsAffected,
    Void,
    batch_length,
)
from querybind.query import execute_update

from conftest import RecordingUnit


class User:
    def __init__(self, id, username):
        self.id = id
        self.username = username


def test_single_mode_binds_in_source_order(recording_unit):
    spec = BindingSpec.build("UPDATE user SET username = ?{1.username} WHERE id = ?{1.id}")
    result = ExecutionStrategy(spec).run(recording_unit, [User(7, "jason")])
    assert result == RowsAffected(1, (1,))
    assert recording_unit.executed() == [('execute_single', ["jason", 7])]


def test_batch_mode_parameter_sets(recording_unit):
    spec = BindingSpec.build("INSERT INTO t (a, b) VALUES (?1, ?2)", batch=True)
    strategy = ExecutionStrategy(spec)
    context = strategy.bind([["a", "b"], [1, 2]])
    assert context.state is ExecutionState.BATCH_BOUND
    assert context.batch_length == 2
    assert context.parameter_sets == [["a", 1], ["b", 2]]

    result = strategy.execute(recording_unit, context)
    assert context.state is ExecutionState.EXECUTED
    assert result == RowsAffected(2, (1, 1))
    assert recording_unit.executed() == [('execute_batch', [["a", 1], ["b", 2]])]


def test_batch_accepts_tuples(recording_unit):
    spec = BindingSpec.build("INSERT INTO t (a) VALUES (?{1.username})", batch=True)
    ExecutionStrategy(spec).run(recording_unit, [(User(1, "x"), User(2, "y"))])
    assert recording_unit.executed() == [('execute_batch', [["x"], ["y"]])]


def test_batch_length_mismatch_fails_before_execution(recording_unit):
    spec = BindingSpec.build("INSERT INTO t (a, b) VALUES (?1, ?2)", batch=True)
    with pytest.raises(BatchShapeError):
        ExecutionStrategy(spec).run(recording_unit, [["a", "b", "c"], [1, 2]])
    assert recording_unit.calls == []


def test_batch_non_sequence_argument(recording_unit):
    spec = BindingSpec.build("INSERT INTO t (a, b) VALUES (?1, ?2)", batch=True)
    with pytest.raises(BatchShapeError):
        ExecutionStrategy(spec).run(recording_unit, [["a"], 1])
    with pytest.raises(BatchShapeError):
        ExecutionStrategy(spec).run(recording_unit, ["ab", "cd"])
    assert recording_unit.calls == []


def test_batch_length():
    assert batch_length([[1, 2], (3, 4)]) == 2
    with pytest.raises(BatchShapeError):
        batch_length([])


def test_empty_batch_executes_nothing(recording_unit):
    spec = BindingSpec.build("INSERT INTO t (a) VALUES (?1)", batch=True, returns=ReturnShape.COUNTS)
    assert execute_update(recording_unit, spec, [[]]) == []
    assert recording_unit.calls == []


def test_out_of_range_index_never_executes(recording_unit):
    spec = BindingSpec.build("UPDATE t SET a = ?9", arity=3)
    for _ in range(2):
        with pytest.raises(BindingError):
            ExecutionStrategy(spec).run(recording_unit, [1, 2, 3])
    assert recording_unit.calls == []


def test_binding_failure_discards_context(recording_unit):
    spec = BindingSpec.build("UPDATE t SET a = ?{1.missing}")
    strategy = ExecutionStrategy(spec)
    with pytest.raises(BindingError):
        strategy.bind([User(1, "x")])
    assert recording_unit.calls == []
    assert spec.template.placeholders[0].path == ("missing",)


def test_unit_failure_becomes_execution_error():
    unit = RecordingUnit(error=RuntimeError("constraint violated"))
    spec = BindingSpec.build("UPDATE t SET a = ?1")
    strategy = ExecutionStrategy(spec)
    context = strategy.bind(["x"])
    with pytest.raises(ExecutionError) as info:
        strategy.execute(unit, context)
    assert isinstance(info.value.__cause__, RuntimeError)
    assert info.value.sql == "UPDATE t SET a = ?1"
    assert context.state is ExecutionState.DISCARDED


def test_discarded_context_cannot_execute(recording_unit):
    spec = BindingSpec.build("UPDATE t SET a = ?1")
    strategy = ExecutionStrategy(spec)
    context = strategy.bind(["x"])
    context.state = ExecutionState.DISCARDED
    with pytest.raises(RuntimeError):
        strategy.execute(recording_unit, context)


def test_void_discards_count():
    unit = RecordingUnit(rows_affected=5)
    spec = BindingSpec.build("DELETE FROM t WHERE a = ?1", returns=ReturnShape.VOID)
    assert ExecutionStrategy(spec).run(unit, ["x"]) == Void()
    assert execute_update(unit, spec, ["x"]) is None


def test_keys_returned_in_unit_order():
    unit = RecordingUnit(rows_affected=2, keys=[(9,), (3,)])
    spec = BindingSpec.build("INSERT INTO t (a) VALUES (?1)",
                             keys=GeneratedKeys.RETURNED_KEYS_DRIVER_DEFINED, returns=ReturnShape.KEYS)
    assert ExecutionStrategy(spec).run(unit, ["x"]) == ReturnedKeys(((9,), (3,)), 2)
    assert execute_update(unit, spec, ["x"]) == [(9,), (3,)]


def test_shared_spec_is_not_mutated(recording_unit):
    spec = BindingSpec.build("UPDATE t SET a = ?1 WHERE b = ?2")
    before = (spec.template, spec.converters)
    with pytest.raises(BindingError):
        ExecutionStrategy(spec).run(recording_unit, ["only-one"])
    ExecutionStrategy(spec).run(recording_unit, ["a", "b"])
    assert (spec.template, spec.converters) == before


def test_execution_does_not_read_environment_config(monkeypatch, recording_unit):
    from querybind.config import reload_default, using_config

    monkeypatch.setenv("QB_CONNECT_TIMEOUT", "abc")
    reload_default()
    try:
        with using_config(None):
            spec = BindingSpec.build("UPDATE t SET a = ?{1.username}")
            assert execute_update(recording_unit, spec, [User(1, "x")]) == 1
    finally:
        reload_default()
    assert recording_unit.executed() == [('execute_single', ["x"])]
