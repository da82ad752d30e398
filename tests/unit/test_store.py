"""Tests for the feed store."""

import pytest

from uiforge.core import ErrorType, OutputStateError, describe_error
from uiforge.models import Output, OutputMode, Round
from uiforge.pipeline import FeedEventKind
from uiforge.pipeline.store import RemoveRound


def make_round(prompt: str = "a login form", outputs: int = 2) -> Round:
    return Round(
        prompt=prompt,
        system_instruction="",
        output_mode=OutputMode.HTML,
        outputs=tuple(Output(model="flash", output_mode=OutputMode.HTML) for _ in range(outputs)),
    )


@pytest.mark.unit
def test_prepend_newest_first(store):
    first, second = make_round("first"), make_round("second")

    store.prepend(first)
    store.prepend(second)

    assert [r.prompt for r in store.rounds] == ["second", "first"]
    assert len(store) == 2


@pytest.mark.unit
def test_remove_and_miss(store):
    round_ = make_round()
    store.prepend(round_)

    assert store.remove(round_.id) is True
    assert store.remove(round_.id) is False
    assert store.get_round(round_.id) is None
    assert len(store) == 0


@pytest.mark.unit
def test_reset(store):
    store.prepend(make_round())
    store.prepend(make_round())

    store.reset()

    assert store.rounds == ()


@pytest.mark.unit
def test_update_output_by_id(store):
    round_ = make_round()
    store.prepend(round_)
    target = round_.outputs[1]

    written = store.update_output(round_.id, target.id, lambda o: o.succeed("<p/>"))

    assert written is True
    assert store.get_output(round_.id, target.id).output_data == "<p/>"
    assert round_.outputs[0].is_busy


@pytest.mark.unit
def test_update_after_removal_is_noop(store):
    round_ = make_round()
    store.prepend(round_)
    store.remove(round_.id)

    written = store.update_output(round_.id, round_.outputs[0].id, lambda o: o.succeed("late"))

    assert written is False
    assert round_.outputs[0].output_data is None


@pytest.mark.unit
def test_update_round_by_id(store):
    round_ = make_round(outputs=3)
    store.prepend(round_)
    details = describe_error(ErrorType.PAGE_FETCH_FAILED)

    def fail_all(target: Round) -> None:
        for output in target.outputs:
            output.fail("Failed to fetch URL", details)

    assert store.update_round(round_.id, fail_all) is True
    assert store.get_round(round_.id).is_settled
    assert store.update_round("round_missing", fail_all) is False


@pytest.mark.unit
def test_settled_output_cannot_settle_again(store):
    round_ = make_round(outputs=1)
    store.prepend(round_)
    output_id = round_.outputs[0].id
    store.update_output(round_.id, output_id, lambda o: o.succeed("<p/>"))

    with pytest.raises(OutputStateError):
        store.update_output(
            round_.id, output_id, lambda o: o.fail("late", describe_error(ErrorType.UNKNOWN))
        )


@pytest.mark.unit
def test_listeners_receive_events(store):
    events = []
    unsubscribe = store.subscribe(events.append)
    round_ = make_round()

    store.prepend(round_)
    store.dispatch(RemoveRound(round_.id))
    store.remove(round_.id)
    unsubscribe()
    store.reset()

    assert [e.kind for e in events] == [FeedEventKind.ROUND_ADDED, FeedEventKind.ROUND_REMOVED]
    assert events[0].round_id == round_.id


@pytest.mark.unit
def test_failing_listener_does_not_block_others(store):
    seen = []

    def broken(event):
        raise RuntimeError("listener bug")

    store.subscribe(broken)
    store.subscribe(seen.append)

    store.prepend(make_round())

    assert len(seen) == 1
    assert len(store) == 1


@pytest.mark.unit
def test_lookup_rejects_mismatched_id_kinds(store):
    round_ = make_round()
    store.prepend(round_)
    output_id = round_.outputs[0].id

    assert store.get_output(round_.id, output_id) is round_.outputs[0]
    assert store.get_output(output_id, round_.id) is None
    assert store.get_round("round_not-a-ulid") is None
    assert store.update_output(round_.id, "out_garbage", lambda o: o.succeed("x")) is False
    assert round_.outputs[0].is_busy
