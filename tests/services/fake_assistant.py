"""Fake Assistant Backend — scripted AssistantClient / AssistantSession for chat service tests.

Invariants:
    - Each create_session() pops the next script (default: Final "ok" + Idle)
    - A session replays its script after send(), one event per loop turn
    - threaded=True pushes events from a worker thread, like an out-of-process backend
    - Scripts without a terminal event leave the exchange open (cancellation tests)

Design Decisions:
    - Counters (start_calls, close_count, ...) instead of mocks: assertions read plainly
"""

import asyncio

from data_copilot.core.assistant_protocols import FinalEvent, IdleEvent


class FakeSession:

    def __init__(self, config, script, threaded=False):
        self.config = config
        self.script = list(script)
        self.threaded = threaded
        self.handlers = []
        self.sent = []
        self.close_count = 0
        self._task = None

    def on(self, handler):
        self.handlers.append(handler)

        def unsubscribe():
            if handler in self.handlers:
                self.handlers.remove(handler)
        return unsubscribe

    async def send(self, prompt):
        self.sent.append(prompt)
        self._task = asyncio.create_task(self._play())

    async def _play(self):
        if self.threaded:
            await asyncio.to_thread(self._emit_all)
            return
        for event in self.script:
            await asyncio.sleep(0)
            self._emit(event)

    def _emit_all(self):
        for event in self.script:
            self._emit(event)

    def _emit(self, event):
        for handler in list(self.handlers):
            handler(event)

    async def aclose(self):
        self.close_count += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()


class FakeAssistantClient:

    def __init__(
        self, scripts=None, start_error=None, stop_error=None,
        start_delay=0.0, threaded=False,
    ):
        self.scripts = list(scripts or [])
        self.start_error = start_error
        self.stop_error = stop_error
        self.start_delay = start_delay
        self.threaded = threaded
        self.start_calls = 0
        self.stop_calls = 0
        self.aclose_calls = 0
        self.sessions = []

    async def start(self):
        self.start_calls += 1
        await asyncio.sleep(self.start_delay)
        if self.start_error is not None:
            raise self.start_error

    async def stop(self):
        self.stop_calls += 1
        if self.stop_error is not None:
            raise self.stop_error

    async def create_session(self, config):
        script = self.scripts.pop(0) if self.scripts else [FinalEvent("ok"), IdleEvent()]
        session = FakeSession(config, script, threaded=self.threaded)
        self.sessions.append(session)
        return session

    async def aclose(self):
        self.aclose_calls += 1
