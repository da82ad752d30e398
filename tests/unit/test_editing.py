"""Tests for edit sessions."""

import asyncio

import pytest

from uiforge.core import ErrorType
from uiforge.models import GenerationResponse, Output, OutputMode, Round
from uiforge.pipeline.editing import EDIT_SYSTEM_INSTRUCTION


class FakeAuthError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.code = 401


@pytest.fixture
def settled_round(store):
    """A round of two outputs that already succeeded."""
    round_ = Round(
        prompt="a login form",
        system_instruction="",
        output_mode=OutputMode.HTML,
        outputs=tuple(Output(model="flash", output_mode=OutputMode.HTML) for _ in range(2)),
    )
    round_.outputs[0].succeed("<form>one</form>")
    round_.outputs[1].succeed("<form>two</form>")
    store.prepend(round_)
    return round_


@pytest.mark.unit
def test_start_editing_copies_content(edit_sessions, settled_round):
    output = settled_round.outputs[0]

    session = edit_sessions.start_editing(settled_round.id, output.id)

    assert session is edit_sessions.session
    assert session.code == "<form>one</form>"
    assert session.is_editing_busy is False
    assert edit_sessions.is_active


@pytest.mark.unit
def test_start_editing_missing_output_keeps_session(edit_sessions, settled_round):
    current = edit_sessions.start_editing(settled_round.id, settled_round.outputs[0].id)

    assert edit_sessions.start_editing(settled_round.id, "out_missing") is None
    assert edit_sessions.session is current


@pytest.mark.unit
def test_start_editing_rejects_pending_output(edit_sessions, store):
    round_ = Round(
        prompt="a login form",
        system_instruction="",
        output_mode=OutputMode.HTML,
        outputs=(Output(model="flash", output_mode=OutputMode.HTML),),
    )
    store.prepend(round_)

    assert edit_sessions.start_editing(round_.id, round_.outputs[0].id) is None
    assert not edit_sessions.is_active


@pytest.mark.unit
@pytest.mark.asyncio
async def test_in_flight_output_not_editable(orchestrator, edit_sessions, fake_backend):
    """Content that arrives after a rejected edit attempt is kept."""
    gate = asyncio.Event()

    async def slow(request):
        await gate.wait()
        return GenerationResponse(text="<nav>done</nav>")

    fake_backend.handler = slow
    orchestrator.set_batch_size(1)
    round_ = orchestrator.submit_nowait("a navbar")
    output = round_.outputs[0]
    await asyncio.sleep(0)

    assert edit_sessions.start_editing(round_.id, output.id) is None
    assert edit_sessions.save_and_close() is False

    gate.set()
    await orchestrator.drain()

    assert output.output_data == "<nav>done</nav>"
    session = edit_sessions.start_editing(round_.id, output.id)
    assert session.code == "<nav>done</nav>"

@pytest.mark.unit
def test_save_and_reopen(edit_sessions, store, settled_round):
    output = settled_round.outputs[0]
    edit_sessions.start_editing(settled_round.id, output.id)
    edit_sessions.update_code("<form>edited</form>")

    assert edit_sessions.save_and_close() is True
    assert not edit_sessions.is_active
    assert store.get_output(settled_round.id, output.id).output_data == "<form>edited</form>"

    reopened = edit_sessions.start_editing(settled_round.id, output.id)
    assert reopened.code == "<form>edited</form>"


@pytest.mark.unit
def test_discard_leaves_output_untouched(edit_sessions, settled_round):
    output = settled_round.outputs[1]
    edit_sessions.start_editing(settled_round.id, output.id)
    edit_sessions.update_code("<form>scratch</form>")

    edit_sessions.discard_and_close()

    assert not edit_sessions.is_active
    assert output.output_data == "<form>two</form>"


@pytest.mark.unit
def test_save_after_round_removed(edit_sessions, store, settled_round):
    edit_sessions.start_editing(settled_round.id, settled_round.outputs[0].id)
    store.remove(settled_round.id)

    assert edit_sessions.save_and_close() is False
    assert not edit_sessions.is_active


@pytest.mark.unit
@pytest.mark.asyncio
async def test_apply_instruction(edit_sessions, fake_backend, settled_round):
    fake_backend.outcomes = ["```html\n<form class=\"dark\">one</form>\n```"]
    edit_sessions.start_editing(settled_round.id, settled_round.outputs[0].id)

    assert await edit_sessions.apply_instruction("make it dark") is True

    session = edit_sessions.session
    assert session.code == '<form class="dark">one</form>'
    assert session.is_editing_busy is False

    request = fake_backend.calls[0]
    assert request.system_instruction == EDIT_SYSTEM_INSTRUCTION
    assert "CURRENT CODE:\n```html\n<form>one</form>\n```" in request.prompt
    assert "MODIFICATION INSTRUCTION:\nmake it dark" in request.prompt
    assert request.thinking_enabled is False
    assert request.temperature == edit_sessions.options.temperature

    # Applying alone never touches the stored output
    assert settled_round.outputs[0].output_data == "<form>one</form>"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_apply_instruction_failure(edit_sessions, fake_backend, settled_round):
    fake_backend.outcomes = [FakeAuthError("API key not valid")]
    edit_sessions.start_editing(settled_round.id, settled_round.outputs[0].id)

    assert await edit_sessions.apply_instruction("make it dark") is False

    session = edit_sessions.session
    assert session.code == "<form>one</form>"
    assert session.is_editing_busy is False
    assert session.last_error.type == ErrorType.AUTH


@pytest.mark.unit
@pytest.mark.asyncio
async def test_apply_instruction_needs_input(edit_sessions, fake_backend, settled_round):
    assert await edit_sessions.apply_instruction("make it dark") is False

    edit_sessions.start_editing(settled_round.id, settled_round.outputs[0].id)
    assert await edit_sessions.apply_instruction("") is False

    edit_sessions.update_code("")
    assert await edit_sessions.apply_instruction("make it dark") is False
    assert fake_backend.calls == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_replaced_session_drops_late_result(edit_sessions, fake_backend, settled_round):
    gate = asyncio.Event()

    async def slow(request):
        await gate.wait()
        return GenerationResponse(text="<form>late</form>")

    fake_backend.handler = slow
    first, second = settled_round.outputs
    edit_sessions.start_editing(settled_round.id, first.id)

    pending = asyncio.ensure_future(edit_sessions.apply_instruction("make it dark"))
    await asyncio.sleep(0)
    replacement = edit_sessions.start_editing(settled_round.id, second.id)
    gate.set()

    assert await pending is False
    assert edit_sessions.session is replacement
    assert replacement.code == "<form>two</form>"
