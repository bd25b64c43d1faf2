"""Tests for debounced draft auto-save."""

import asyncio

import pytest

from namingops.client.api_client import ApiError
from namingops.client.autosave import AUTOSAVE_DELAY_SECONDS, DraftAutosaver
from namingops.client.storage import DRAFT_KEY, LocalStorage


class SaveSpy:
    def __init__(self, fail_times: int = 0):
        self.saved: list[dict] = []
        self.fail_times = fail_times

    async def __call__(self, data):
        if self.fail_times:
            self.fail_times -= 1
            raise ApiError("Failed to save draft", status=503)
        self.saved.append(data)
        return data


def test_default_delay():
    assert AUTOSAVE_DELAY_SECONDS == 2.0
    assert DraftAutosaver(SaveSpy()).delay == 2.0


@pytest.mark.asyncio
async def test_rapid_changes_coalesce_into_one_save(tmp_path):
    spy = SaveSpy()
    storage = LocalStorage(tmp_path / "client.json")
    saver = DraftAutosaver(spy, delay=0.05, storage=storage)

    saver.schedule({"title": "F"})
    saver.schedule({"title": "Fa"})
    saver.schedule({"title": "Falcon"})
    assert saver.has_pending
    assert storage.get(DRAFT_KEY) == {"title": "Falcon"}

    await asyncio.sleep(0.2)

    assert spy.saved == [{"title": "Falcon"}]
    assert saver.save_count == 1
    assert saver.last_saved == {"title": "Falcon"}
    assert not saver.has_pending


@pytest.mark.asyncio
async def test_flush_saves_immediately():
    spy = SaveSpy()
    saver = DraftAutosaver(spy, delay=60)

    saver.schedule({"title": "Kestrel"})
    await saver.flush()

    assert spy.saved == [{"title": "Kestrel"}]
    assert not saver.has_pending

    await saver.flush()
    assert len(spy.saved) == 1


@pytest.mark.asyncio
async def test_cancel_drops_scheduled_save():
    spy = SaveSpy()
    saver = DraftAutosaver(spy, delay=0.05)

    saver.schedule({"title": "Osprey"})
    saver.cancel()
    await asyncio.sleep(0.1)

    assert spy.saved == []


@pytest.mark.asyncio
async def test_failed_save_is_retried_on_flush():
    spy = SaveSpy(fail_times=1)
    saver = DraftAutosaver(spy, delay=60)

    saver.schedule({"title": "Falcon"})
    await saver.flush()
    assert spy.saved == []
    assert saver.last_error["status"] == 503

    await saver.flush()
    assert spy.saved == [{"title": "Falcon"}]
    assert saver.last_error is None


class SlowSave(SaveSpy):
    def __init__(self, hold: float = 0.1):
        super().__init__()
        self.hold = hold
        self.started = asyncio.Event()

    async def __call__(self, data):
        self.started.set()
        await asyncio.sleep(self.hold)
        return await super().__call__(data)


@pytest.mark.asyncio
async def test_flush_during_save_does_not_lose_draft():
    spy = SlowSave()
    saver = DraftAutosaver(spy, delay=0.01)

    saver.schedule({"title": "Heron"})
    await spy.started.wait()
    assert saver.has_pending

    await saver.flush()

    assert spy.saved == [{"title": "Heron"}]
    assert saver.save_count == 1
    assert not saver.has_pending


@pytest.mark.asyncio
async def test_change_during_save_is_saved_after_it():
    spy = SlowSave()
    saver = DraftAutosaver(spy, delay=0.01)

    saver.schedule({"title": "Heron"})
    await spy.started.wait()
    saver.schedule({"title": "Heron Two"})
    await saver.flush()

    assert spy.saved == [{"title": "Heron"}, {"title": "Heron Two"}]
    assert saver.last_saved == {"title": "Heron Two"}
