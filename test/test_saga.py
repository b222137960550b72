import pytest

from marketplace.services.saga import Saga


async def test_run_records_completed_steps_in_order():
    saga = Saga("test")

    async def action_a():
        return "a"

    async def action_b():
        return "b"

    assert await saga.run("a", action_a) == "a"
    assert await saga.run("b", action_b) == "b"
    assert [step.name for step in saga.completed] == ["a", "b"]
    assert saga.step("b").result == "b"


async def test_failed_step_is_not_recorded():
    saga = Saga("test")

    async def boom():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await saga.run("boom", boom)
    assert saga.completed == []
    assert saga.step("boom") is None


async def test_compensation_receives_step_result_in_requested_order():
    saga = Saga("test")
    undone = []

    async def undo(result):
        undone.append(result)

    async def make(value):
        return value

    await saga.run("first", lambda: make({"id": 1}), compensation=undo)
    await saga.run("second", lambda: make("file.jpg"), compensation=undo)

    compensated = await saga.compensate("second", "first")

    assert compensated == ["second", "first"]
    assert undone == ["file.jpg", {"id": 1}]


async def test_compensate_skips_unknown_and_already_undone_steps():
    saga = Saga("test")
    calls = []

    async def undo(result):
        calls.append(result)

    async def make():
        return 42

    await saga.run("step", make, compensation=undo)
    await saga.run("no_undo", make)

    assert await saga.compensate("missing", "no_undo", "step") == ["step"]
    assert await saga.compensate("step") == []
    assert calls == [42]


async def test_failing_compensation_does_not_stop_the_others():
    saga = Saga("test")
    calls = []

    async def broken(result):
        raise RuntimeError("cannot undo")

    async def undo(result):
        calls.append(result)

    async def make(value):
        return value

    await saga.run("a", lambda: make("a"), compensation=undo)
    await saga.run("b", lambda: make("b"), compensation=broken)

    assert await saga.compensate("b", "a") == ["a"]
    assert calls == ["a"]
    assert saga.step("b").compensated is False
