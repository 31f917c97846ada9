import asyncio
import unittest

from runtime import AsyncioTickSource


class _FakeHandle:
    def __init__(self, delay: float, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class _FakeLoop:
    def __init__(self):
        self.scheduled: list[_FakeHandle] = []

    def call_later(self, delay, callback):
        handle = _FakeHandle(delay, callback)
        self.scheduled.append(handle)
        return handle

    def pending(self) -> list[_FakeHandle]:
        return [handle for handle in self.scheduled if not handle.cancelled]

    def run_due(self) -> int:
        due = self.pending()
        self.scheduled = []
        for handle in due:
            handle.callback()
        return len(due)


class AsyncioTickSourceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.loop = _FakeLoop()
        self.source = AsyncioTickSource(loop=self.loop)

    def test_subscription_rearms_after_each_callback(self) -> None:
        calls: list[int] = []
        self.source.subscribe(250, lambda: calls.append(1))

        for _ in range(3):
            self.assertEqual(1, self.loop.run_due())

        self.assertEqual(3, len(calls))
        self.assertEqual([0.25], [handle.delay for handle in self.loop.pending()])
        self.assertEqual(1, self.source.active_count)

    def test_cancel_stops_delivery(self) -> None:
        calls: list[int] = []
        token = self.source.subscribe(1000, lambda: calls.append(1))
        self.loop.run_due()

        self.source.cancel(token)

        self.assertEqual(0, self.loop.run_due())
        self.assertEqual(1, len(calls))
        self.assertEqual(0, self.source.active_count)

    def test_callback_may_cancel_its_own_subscription(self) -> None:
        calls: list[int] = []
        token_holder: dict[str, int] = {}

        def callback() -> None:
            calls.append(1)
            if len(calls) == 2:
                self.source.cancel(token_holder["token"])

        token_holder["token"] = self.source.subscribe(1000, callback)
        while self.loop.run_due():
            pass

        self.assertEqual(2, len(calls))
        self.assertEqual(0, self.source.active_count)

    def test_failing_callback_stops_its_subscription(self) -> None:
        def callback() -> None:
            raise RuntimeError("boom")

        self.source.subscribe(1000, callback)
        with self.assertLogs("ticks", level="ERROR"):
            self.loop.run_due()

        self.assertEqual([], self.loop.pending())
        self.assertEqual(0, self.source.active_count)

    def test_cancel_unknown_or_repeated_token_is_noop(self) -> None:
        self.source.cancel(12345)
        token = self.source.subscribe(1000, lambda: None)
        self.source.cancel(token)
        self.source.cancel(token)
        self.assertEqual(0, self.source.active_count)

    def test_rejects_non_positive_period(self) -> None:
        with self.assertRaises(ValueError):
            self.source.subscribe(0, lambda: None)


class AsyncioTickSourceRunningLoopTests(unittest.IsolatedAsyncioTestCase):
    async def test_uses_running_loop_when_none_given(self) -> None:
        source = AsyncioTickSource()
        fired = asyncio.Event()

        token = source.subscribe(1, fired.set)
        await asyncio.wait_for(fired.wait(), timeout=1.0)
        source.cancel(token)

        self.assertEqual(0, source.active_count)


if __name__ == "__main__":
    unittest.main()
