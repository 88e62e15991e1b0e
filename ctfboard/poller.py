"""Fixed-interval polling of the CTFd API."""

import logging
import threading
from concurrent import futures
from enum import Enum
from typing import Callable, Optional

from .client import BaseClient
from .constants import (
    AWARDS_ENDPOINT,
    CHALLENGES_ENDPOINT,
    POLL_ENDPOINTS,
    POLL_INTERVAL_SECONDS,
    SCOREBOARD_ENDPOINT,
    USERS_ENDPOINT,
)
from .dashboard import LeaderboardUnavailable, collection_from_result, teams_from_results
from .models import Failure, FetchResult, LeaderboardSnapshot
from .ranking import mid_band, top_band
from .validators import validate_standings

logger = logging.getLogger('ctfboard.poller')


class PollState(Enum):
    IDLE = 'idle'
    FETCHING = 'fetching'


class PollController:
    """
    Refreshes the leaderboard snapshot on a fixed interval.

    ``start()`` runs a cycle right away and then one every ``interval``
    seconds, driven by a timer thread owned by the controller. The timer
    doesn't wait for cycles to finish, so a slow cycle can overlap the
    next one; only the newest finished cycle is published. ``stop()``
    ends the timer without cancelling cycles already in flight.
    Use it as a context manager to tie the timer to a block:

        with PollController(client, on_update=render) as poller:
            poller.wait()
    """

    def __init__(
        self,
        client: BaseClient,
        interval: float = POLL_INTERVAL_SECONDS,
        on_update: Optional[Callable[[LeaderboardSnapshot], None]] = None,
    ):
        if interval <= 0:
            raise ValueError(f'Poll interval must be positive, got {interval}')
        self.client = client
        self.interval = interval
        self.on_update = on_update
        self._snapshot: Optional[LeaderboardSnapshot] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._in_flight = 0
        self._started_cycles = 0
        self._published_cycle = 0

    @property
    def snapshot(self) -> Optional[LeaderboardSnapshot]:
        """Most recent complete snapshot (None before the first cycle)."""
        return self._snapshot

    @property
    def state(self) -> PollState:
        """FETCHING while any cycle has requests outstanding."""
        return PollState.FETCHING if self._in_flight else PollState.IDLE

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _settle(self, endpoint: str, future: futures.Future) -> FetchResult:
        try:
            return future.result()
        except Exception as e:
            logger.exception(f'Unexpected error fetching {endpoint}')
            return Failure(str(e) or e.__class__.__name__)

    def fetch_all(self) -> dict[str, FetchResult]:
        """Fetch every poll resource concurrently and wait for all of them."""
        with futures.ThreadPoolExecutor(max_workers=len(POLL_ENDPOINTS)) as executor:
            pending = {
                endpoint: executor.submit(self.client.fetch, endpoint)
                for endpoint in POLL_ENDPOINTS
            }
            return {endpoint: self._settle(endpoint, future) for endpoint, future in pending.items()}

    def build_snapshot(self, results: dict[str, FetchResult]) -> LeaderboardSnapshot:
        """
        Turn one cycle's fetch results into a snapshot.

        Challenges and awards fall back to empty lists on their own. Only a
        failure to rank any teams sets the snapshot's error.
        """
        challenges = collection_from_result(results[CHALLENGES_ENDPOINT], 'challenges')
        awards = collection_from_result(results[AWARDS_ENDPOINT], 'awards')

        try:
            teams = teams_from_results(results[SCOREBOARD_ENDPOINT], results[USERS_ENDPOINT])
        except LeaderboardUnavailable as e:
            logger.error(f'Error fetching CTFd data: {e}')
            return LeaderboardSnapshot(challenges=challenges, awards=awards, error=str(e))

        for message in validate_standings(teams):
            logger.warning(message)

        return LeaderboardSnapshot(
            teams=teams,
            top3_teams=top_band(teams),
            teams_ranked_4_to_13=mid_band(teams),
            challenges=challenges,
            awards=awards,
        )

    def refetch(self) -> LeaderboardSnapshot:
        """Run one poll cycle and publish its snapshot."""
        with self._lock:
            self._in_flight += 1
            self._started_cycles += 1
            cycle = self._started_cycles
        try:
            snapshot = self.build_snapshot(self.fetch_all())
        finally:
            with self._lock:
                self._in_flight -= 1

        with self._lock:
            # A slow cycle never overwrites the result of a later one
            if cycle < self._published_cycle:
                logger.info(f'Discarding stale result of poll cycle {cycle}')
                return snapshot
            self._published_cycle = cycle
            # Readers keep the previous snapshot until this assignment
            self._snapshot = snapshot

        logger.info(
            f'Poll cycle complete: {len(snapshot.teams)} teams, '
            f'{len(snapshot.challenges)} challenges, {len(snapshot.awards)} awards'
        )

        if self.on_update is not None:
            try:
                self.on_update(snapshot)
            except Exception:
                logger.exception('on_update callback failed')

        return snapshot

    def _cycle(self) -> None:
        try:
            self.refetch()
        except Exception:
            logger.exception('Poll cycle failed')

    def _run(self, stop_event: threading.Event) -> None:
        # Fixed rate: each tick launches a cycle on its own thread, so a
        # hung request delays only its own cycle
        while True:
            threading.Thread(target=self._cycle, name='ctfboard-poll-cycle', daemon=True).start()
            if stop_event.wait(self.interval):
                return

    def start(self) -> None:
        """Start polling; does nothing if already running."""
        if self.running:
            return
        # Each run gets its own event so a stopped timer can never be revived
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), name='ctfboard-poller', daemon=True
        )
        self._thread.start()
        logger.info(f'Polling every {self.interval:g}s')

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Stop the timer and wait up to ``timeout`` seconds for its thread.

        Cycles already in flight are not cancelled; they finish on their own.
        """
        self._stop_event.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        logger.info('Polling stopped')

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until stop() is called or the timeout passes."""
        return self._stop_event.wait(timeout)

    def __enter__(self) -> 'PollController':
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
