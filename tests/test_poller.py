"""Tests for the poll controller."""

import threading
import time
from unittest.mock import Mock

import pytest
import requests

from ctfboard.client import BaseClient, CTFdClient, FallbackClient
from ctfboard.fallback import PLACEHOLDER_AWARDS, PLACEHOLDER_CHALLENGES
from ctfboard.models import Failure, LeaderboardSnapshot, Success
from ctfboard.poller import PollController, PollState


class StubClient(BaseClient):
    """Client returning canned results per endpoint and recording calls."""

    def __init__(self, results):
        self.results = results
        self.calls = []
        self.lock = threading.Lock()

    def fetch(self, endpoint):
        with self.lock:
            self.calls.append(endpoint)
        result = self.results[endpoint]
        if isinstance(result, Exception):
            raise result
        return result


def make_users(count):
    return [
        {'id': i, 'name': f'player{i}', 'affiliation': f'Team {i}', 'score': 1000 - i * 10, 'solves': i}
        for i in range(1, count + 1)
    ]


@pytest.fixture
def live_results():
    return {
        '/scoreboard': Success([]),
        '/users': Success(make_users(15)),
        '/challenges': Success([{'id': 1, 'name': 'Warmup'}]),
        '/awards': Success([]),
    }


class TestPollCycle:
    """Tests for a single poll cycle."""

    def test_fetches_all_four_resources(self, live_results):
        """Test one cycle asks for scoreboard, users, challenges and awards."""
        client = StubClient(live_results)
        PollController(client).refetch()
        assert sorted(client.calls) == ['/awards', '/challenges', '/scoreboard', '/users']

    def test_snapshot_bands(self, live_results):
        """Test the snapshot carries the full ranking and both bands."""
        snapshot = PollController(StubClient(live_results)).refetch()

        assert snapshot.error is None
        assert len(snapshot.teams) == 15
        assert [t.place for t in snapshot.top3_teams] == [1, 2, 3]
        assert [t.place for t in snapshot.teams_ranked_4_to_13] == list(range(4, 14))
        assert snapshot.challenges == [{'id': 1, 'name': 'Warmup'}]
        assert snapshot.total_solves == sum(range(1, 16))

    def test_snapshot_replaced_and_state_idle(self, live_results):
        """Test each cycle publishes a new snapshot and returns to idle."""
        poller = PollController(StubClient(live_results))
        assert poller.snapshot is None
        assert poller.state is PollState.IDLE

        first = poller.refetch()
        second = poller.refetch()

        assert poller.snapshot is second
        assert first is not second
        assert poller.state is PollState.IDLE

    def test_state_is_fetching_during_cycle(self, live_results):
        """Test the controller reports fetching while requests are out."""
        seen = []

        class ObservingClient(StubClient):
            def fetch(self, endpoint):
                seen.append(poller.state)
                return super().fetch(endpoint)

        poller = PollController(ObservingClient(live_results))
        poller.refetch()
        assert seen and all(state is PollState.FETCHING for state in seen)

    def test_partial_failure_degrades_silently(self, live_results):
        """Test failing challenges and awards just become empty lists."""
        live_results['/challenges'] = Failure('permission denied')
        live_results['/awards'] = Failure('HTTP error! status: 500', status=500)

        snapshot = PollController(StubClient(live_results)).refetch()

        assert snapshot.error is None
        assert snapshot.challenges == []
        assert snapshot.awards == []
        assert len(snapshot.teams) == 15

    def test_top_level_failure_sets_error(self, live_results):
        """Test losing both team sources sets the banner error."""
        live_results['/scoreboard'] = Failure('down')
        live_results['/users'] = Failure('down')

        snapshot = PollController(StubClient(live_results)).refetch()

        assert snapshot.error is not None
        assert 'Unable to fetch team data' in snapshot.error
        assert snapshot.teams == []
        assert snapshot.top3_teams == []
        assert snapshot.challenges == [{'id': 1, 'name': 'Warmup'}]

    def test_unexpected_exception_is_contained(self, live_results):
        """Test a client bug in one fetch doesn't escape the cycle."""
        live_results['/awards'] = RuntimeError('boom')
        snapshot = PollController(StubClient(live_results)).refetch()
        assert snapshot.awards == []
        assert snapshot.error is None

    def test_all_transport_failures_use_placeholders(self):
        """Test a dead network still yields a snapshot built from placeholder data."""
        session = Mock()
        session.get.side_effect = requests.ConnectionError('unreachable')
        client = FallbackClient(CTFdClient('http://ctf.local/api/v1', session=session))

        snapshot = PollController(client).refetch()

        assert snapshot.error is None
        assert snapshot.challenges == PLACEHOLDER_CHALLENGES
        assert snapshot.awards == PLACEHOLDER_AWARDS
        assert [t.name for t in snapshot.top3_teams] == ['Red Team', 'Blue Team', 'Purple Team']
        assert session.get.call_count == 4

    def test_on_update_called(self, live_results):
        """Test the callback receives the new snapshot."""
        received = []
        poller = PollController(StubClient(live_results), on_update=received.append)
        snapshot = poller.refetch()
        assert received == [snapshot]

    def test_on_update_failure_is_logged(self, live_results, caplog):
        """Test a failing callback doesn't break the cycle."""
        poller = PollController(StubClient(live_results), on_update=Mock(side_effect=RuntimeError('render')))
        snapshot = poller.refetch()
        assert poller.snapshot is snapshot
        assert 'on_update callback failed' in caplog.text

    def test_snapshot_to_dict(self, live_results):
        """Test the consumer-facing JSON shape."""
        data = PollController(StubClient(live_results)).refetch().to_dict()
        team = data['top3Teams'][0]
        assert set(team) >= {'id', 'name', 'score', 'solves', 'place', 'members'}
        assert len(data['teamsRanked4to13']) == 10
        assert data['teamCount'] == 15
        assert data['error'] is None


class TestTimer:
    """Tests for the repeating timer."""

    def test_invalid_interval(self):
        """Test a non-positive interval is rejected."""
        with pytest.raises(ValueError):
            PollController(StubClient({}), interval=0)

    def test_runs_immediately_and_repeats(self, live_results):
        """Test start() runs a cycle right away and then on every tick."""
        cycles = threading.Semaphore(0)
        poller = PollController(
            StubClient(live_results),
            interval=0.01,
            on_update=lambda snapshot: cycles.release(),
        )
        poller.start()
        try:
            assert poller.running
            for _ in range(3):
                assert cycles.acquire(timeout=5)
        finally:
            poller.stop(timeout=5)
        assert not poller.running

    def test_stop_halts_timer(self, live_results):
        """Test no new cycles start after stop()."""
        client = StubClient(live_results)
        first_cycle = threading.Event()
        poller = PollController(client, interval=0.01, on_update=lambda s: first_cycle.set())
        poller.start()
        assert first_cycle.wait(timeout=5)
        poller.stop(timeout=5)

        # Let any cycle launched just before stop() finish
        time.sleep(0.2)
        calls_after_stop = len(client.calls)
        assert poller.wait(timeout=0.2)
        assert len(client.calls) == calls_after_stop

    def test_hung_request_does_not_block_timer(self, live_results):
        """Test cycles keep starting on schedule while one request hangs."""
        release = threading.Event()

        class HangingClient(StubClient):
            def fetch(self, endpoint):
                with self.lock:
                    first = endpoint == '/scoreboard' and '/scoreboard' not in self.calls
                if first:
                    super().fetch(endpoint)
                    release.wait(timeout=10)
                    return self.results[endpoint]
                return super().fetch(endpoint)

        client = HangingClient(live_results)
        updated = threading.Event()
        poller = PollController(client, interval=0.05, on_update=lambda s: updated.set())
        poller.start()
        try:
            assert updated.wait(timeout=5)
            deadline = time.monotonic() + 5
            while client.calls.count('/scoreboard') < 4 and time.monotonic() < deadline:
                time.sleep(0.02)
            assert client.calls.count('/scoreboard') >= 4
            assert poller.snapshot is not None
            assert len(poller.snapshot.teams) == 15
        finally:
            release.set()
            poller.stop(timeout=5)

    def test_stale_cycle_not_published(self, live_results):
        """Test a slow cycle finishing late doesn't replace a newer snapshot."""
        release = threading.Event()
        slow_started = threading.Event()

        class SlowFirstClient(StubClient):
            def fetch(self, endpoint):
                result = super().fetch(endpoint)
                with self.lock:
                    first_users = endpoint == '/users' and self.calls.count('/users') == 1
                if first_users:
                    slow_started.set()
                    release.wait(timeout=10)
                    return Success([])
                return result

        poller = PollController(SlowFirstClient(live_results))
        slow_results = []
        slow = threading.Thread(target=lambda: slow_results.append(poller.refetch()))
        slow.start()
        assert slow_started.wait(timeout=5)

        fresh = poller.refetch()
        release.set()
        slow.join(timeout=5)

        assert slow_results and slow_results[0].teams == []
        assert poller.snapshot is fresh
        assert len(poller.snapshot.teams) == 15

    def test_restart_after_timed_out_stop(self, live_results):
        """Test restarting never leaves the previous timer thread running."""
        poller = PollController(StubClient(live_results), interval=0.01)
        poller.start()
        old_thread = poller._thread
        poller.stop(timeout=0)
        poller.start()
        try:
            old_thread.join(timeout=5)
            assert not old_thread.is_alive()
            assert poller.running
            assert poller._thread is not old_thread
        finally:
            poller.stop(timeout=5)

    def test_context_manager(self, live_results):
        """Test the timer is tied to the with block."""
        updated = threading.Event()
        with PollController(StubClient(live_results), interval=60, on_update=lambda s: updated.set()) as poller:
            assert updated.wait(timeout=5)
            assert isinstance(poller.snapshot, LeaderboardSnapshot)
        assert not poller.running

    def test_start_twice_keeps_one_thread(self, live_results):
        """Test calling start() again while running is a no-op."""
        poller = PollController(StubClient(live_results), interval=60)
        poller.start()
        try:
            thread = poller._thread
            poller.start()
            assert poller._thread is thread
        finally:
            poller.stop(timeout=5)
