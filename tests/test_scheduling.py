import asyncio
import threading
import time

import pytest
import underbar as _
from underbar import (
    AsyncioScheduler,
    LibrarySettings,
    MonotonicClock,
    SchedulerBackend,
    SchedulerUnavailableError,
    StableKeyError,
    ThreadingScheduler,
    VirtualTimeline,
    default_scheduler,
    json_stable_key,
)


class TestVirtualTimeline:
    """Test the manual clock/scheduler used for deterministic timing"""

    def test_time_moves_only_on_advance(self, timeline):
        assert timeline.now() == 0
        timeline.advance(25)
        assert timeline.now() == 25

    def test_callbacks_run_in_due_order(self, timeline):
        order = []
        timeline.schedule_after(30, lambda: order.append('late'))
        timeline.schedule_after(10, lambda: order.append('early'))
        timeline.schedule_after(10, lambda: order.append('early-2'))
        ran = timeline.advance(50)
        assert ran == 3
        assert order == ['early', 'early-2', 'late'], f"Unexpected order: {order}"

    def test_clock_reads_due_time_inside_callback(self, timeline):
        seen = []
        timeline.schedule_after(40, lambda: seen.append(timeline.now()))
        timeline.advance(100)
        assert seen == [40]
        assert timeline.now() == 100

    def test_nested_scheduling_within_window(self, timeline):
        order = []

        def outer():
            order.append('outer')
            timeline.schedule_after(10, lambda: order.append('inner'))

        timeline.schedule_after(10, outer)
        timeline.advance(15)
        assert order == ['outer']
        timeline.advance(5)
        assert order == ['outer', 'inner']
        assert timeline.pending == 0


class TestThreadingScheduler:
    """Test wall-clock scheduling on timer threads"""

    def test_callback_runs_after_delay(self):
        done = threading.Event()
        clock = MonotonicClock()
        start = clock.now()
        fired_at = []

        def callback():
            fired_at.append(clock.now())
            done.set()

        ThreadingScheduler().schedule_after(30, callback)
        assert done.wait(2.0), "Callback never ran"
        assert fired_at[0] - start >= 25, f"Callback ran too early: {fired_at[0] - start:.1f}ms"

    def test_throttle_with_real_time(self):
        """Test leading + trailing edge against the real clock"""
        calls = []
        throttled = _.throttle(lambda n: calls.append(n), 100,
                               clock=MonotonicClock(), scheduler=ThreadingScheduler())
        for n in range(10):
            throttled(n)
            time.sleep(0.005)
        time.sleep(0.3)
        assert calls == [0, 9], f"Expected leading and trailing calls, got {calls}"

    def test_throttle_windows_hold_across_timer_and_caller_threads(self):
        """Test that trailing calls on timer threads never overlap caller invocations"""
        clock = MonotonicClock()
        invoked_at = []
        throttled = _.throttle(lambda: invoked_at.append(clock.now()), 40,
                               clock=clock, scheduler=ThreadingScheduler())

        def hammer():
            deadline = clock.now() + 250
            while clock.now() < deadline:
                throttled()
                time.sleep(0.001)

        workers = [threading.Thread(target=hammer) for _n in range(4)]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()
        time.sleep(0.15)

        assert len(invoked_at) >= 2, f"Expected several invocations, got {len(invoked_at)}"
        gaps = [later - earlier for earlier, later in zip(invoked_at, invoked_at[1:])]
        # Tolerance covers thread switches between the window stamp and the append
        assert min(gaps) >= 30, f"Two invocations landed in one window: gaps {gaps}"


class TestAsyncioScheduler:
    """Test event-loop scheduling"""

    @pytest.mark.asyncio
    async def test_delay_on_running_loop(self):
        fired = asyncio.Event()
        results = []

        def callback(value):
            results.append(value)
            fired.set()

        _.delay(callback, 20, 'done', scheduler=AsyncioScheduler())
        assert results == []
        await asyncio.wait_for(fired.wait(), timeout=2.0)
        assert results == ['done']

    @pytest.mark.asyncio
    async def test_throttle_trailing_on_loop(self):
        calls = []
        throttled = _.throttle(lambda n: calls.append(n), 50, scheduler=AsyncioScheduler())
        throttled(1)
        throttled(2)
        throttled(3)
        assert calls == [1]
        await asyncio.sleep(0.2)
        assert calls == [1, 3], f"Expected trailing call with last args, got {calls}"

    def test_no_running_loop(self):
        with pytest.raises(SchedulerUnavailableError):
            AsyncioScheduler().schedule_after(10, lambda: None)

    def test_closed_loop(self):
        loop = asyncio.new_event_loop()
        loop.close()
        with pytest.raises(SchedulerUnavailableError):
            AsyncioScheduler(loop).schedule_after(10, lambda: None)


class TestStableKey:
    """Test deterministic argument encoding"""

    def test_equal_arguments_equal_keys(self):
        assert json_stable_key((1, 'a', None), {}) == json_stable_key((1, 'a', None), {})

    def test_kwargs_order_independent(self):
        assert json_stable_key((), {'a': 1, 'b': 2}) == json_stable_key((), {'b': 2, 'a': 1})

    def test_types_are_distinguished(self):
        keys = {json_stable_key((value,), {}) for value in (1, 1.0, True, '1', None)}
        assert len(keys) == 5

    def test_positional_order_matters(self):
        assert json_stable_key((1, 2)) != json_stable_key((2, 1))

    def test_unencodable(self):
        with pytest.raises(StableKeyError):
            json_stable_key((object(),), {})
        assert issubclass(StableKeyError, TypeError)


class TestDefaultScheduler:
    """Test backend selection from settings"""

    def test_threading_by_default(self, monkeypatch):
        monkeypatch.delenv('UNDERBAR_SCHEDULER_BACKEND', raising=False)
        assert isinstance(default_scheduler(), ThreadingScheduler)

    def test_asyncio_from_settings(self):
        settings = LibrarySettings(scheduler_backend=SchedulerBackend.ASYNCIO)
        assert isinstance(default_scheduler(settings), AsyncioScheduler)

    def test_asyncio_from_environment(self, monkeypatch):
        monkeypatch.setenv('UNDERBAR_SCHEDULER_BACKEND', 'AsyncIO')
        assert isinstance(default_scheduler(), AsyncioScheduler)
