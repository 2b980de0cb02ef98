"""Fetch -> parse -> filter -> score -> rank discovery pipeline."""

import time
import uuid
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor

import structlog

from src.feed.models import CandidateRecord
from src.feed.parser import FeedParser
from src.fetch.client import FeedFetcher
from src.fetch.models import FetchError, FetchErrorClass
from src.observability.logging import bind_cycle_context, clear_cycle_context
from src.pipeline.models import CycleResult, CycleStatus
from src.pipeline.state_machine import CycleState, CycleStateMachine
from src.ranker.models import ScoringWeights
from src.ranker.ranker import CandidateRanker
from src.settings.app import AppSettings


logger = structlog.get_logger()

ResultCallback = Callable[[list[CandidateRecord]], None]


class DiscoveryPipeline:
    """Runs one fetch-and-rank cycle per call.

    The pipeline holds configuration only. Each cycle builds an independent
    CycleResult; nothing is cached between cycles, so concurrent cycles never
    share ranking state. Which result is authoritative is the caller's call.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        fetcher: FeedFetcher | None = None,
        weights: ScoringWeights | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            settings: Application settings.
            fetcher: Feed fetcher; built from settings when omitted.
            weights: Composite score weights.
        """
        self._settings = settings or AppSettings()
        self._fetcher = fetcher or FeedFetcher(self._settings.fetch_config())
        self._parser = FeedParser(host_suffix=self._settings.host_suffix)
        self._ranker = CandidateRanker(
            excluded_region_code=self._settings.excluded_region_code,
            weights=weights,
        )
        self._log = logger.bind(component="pipeline")

    def run(self, cycle_id: str | None = None) -> CycleResult:
        """Run one cycle on the current thread.

        Never raises: every failure degrades to an empty result.

        Args:
            cycle_id: Optional identifier; a random one is generated otherwise.

        Returns:
            The cycle outcome.
        """
        cycle_id = cycle_id or uuid.uuid4().hex[:12]
        state_machine = CycleStateMachine(cycle_id)
        start = time.perf_counter()
        bind_cycle_context(cycle_id)

        try:
            result = self._run_stages(cycle_id, state_machine, start)
        except Exception as e:  # noqa: BLE001
            self._log.exception("cycle_crashed", error=str(e))
            if not state_machine.is_terminal():
                state_machine.transition(CycleState.CYCLE_FAILED)
            result = self._failed_result(
                cycle_id,
                f"Cycle failed: {e}",
                duration_ms=(time.perf_counter() - start) * 1000,
            )
        finally:
            clear_cycle_context()

        return result

    def submit(
        self,
        on_result: ResultCallback | None = None,
        executor: ThreadPoolExecutor | None = None,
    ) -> "Future[CycleResult]":
        """Run one cycle in the background.

        ``on_result`` receives the ranked records exactly once, on the worker
        thread, including an empty list when the cycle fails. The returned
        future is done once delivery has happened; until then the cycle is
        still loading. If ``executor`` no longer accepts work, the cycle fails
        immediately and the empty list is delivered on the caller's thread.

        Args:
            on_result: Optional consumer callback.
            executor: Executor to run on; a private single-worker one is used
                when omitted.

        Returns:
            Future resolving to the CycleResult.
        """
        if executor is not None:
            try:
                return executor.submit(self._run_and_deliver, on_result)
            except RuntimeError as e:
                self._log.error("executor_unavailable", error=str(e))
                result = self._failed_result(
                    uuid.uuid4().hex[:12], f"Executor unavailable: {e}"
                )
                self._deliver(result, on_result)
                future: Future[CycleResult] = Future()
                future.set_result(result)
                return future

        private_executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="discovery"
        )
        try:
            return private_executor.submit(self._run_and_deliver, on_result)
        finally:
            # Lets the submitted cycle finish, then releases the worker
            private_executor.shutdown(wait=False)

    def _run_and_deliver(self, on_result: ResultCallback | None) -> CycleResult:
        """Run a cycle and hand its records to the callback."""
        result = self.run()
        self._deliver(result, on_result)
        return result

    def _deliver(self, result: CycleResult, on_result: ResultCallback | None) -> None:
        if on_result is None:
            return
        try:
            on_result(result.records)
        except Exception as e:  # noqa: BLE001
            self._log.exception(
                "result_callback_failed",
                cycle_id=result.cycle_id,
                error=str(e),
            )

    @staticmethod
    def _failed_result(
        cycle_id: str, message: str, duration_ms: float = 0.0
    ) -> CycleResult:
        """Build the empty result of a cycle that could not complete."""
        return CycleResult(
            cycle_id=cycle_id,
            status=CycleStatus.FETCH_FAILED,
            error=FetchError(error_class=FetchErrorClass.UNKNOWN, message=message),
            duration_ms=duration_ms,
        )

    def _run_stages(
        self,
        cycle_id: str,
        state_machine: CycleStateMachine,
        start: float,
    ) -> CycleResult:
        """Run the stages of one cycle."""
        self._log.info("cycle_started")

        fetch_result = self._fetcher.fetch()
        if not fetch_result.is_success:
            state_machine.transition(CycleState.CYCLE_FAILED)
            duration_ms = (time.perf_counter() - start) * 1000
            self._log.warning(
                "cycle_complete",
                status=CycleStatus.FETCH_FAILED.value,
                error_class=(
                    fetch_result.error.error_class.value
                    if fetch_result.error
                    else None
                ),
                duration_ms=round(duration_ms, 2),
            )
            return CycleResult(
                cycle_id=cycle_id,
                status=CycleStatus.FETCH_FAILED,
                error=fetch_result.error,
                duration_ms=duration_ms,
            )
        state_machine.transition(CycleState.CYCLE_FETCHED)

        parse_result = self._parser.parse(fetch_result.text)
        state_machine.transition(CycleState.CYCLE_PARSED)

        ranked = self._ranker.rank(parse_result.records)
        state_machine.transition(CycleState.CYCLE_RANKED)

        status = CycleStatus.EMPTY if ranked.is_empty else CycleStatus.RANKED
        duration_ms = (time.perf_counter() - start) * 1000

        self._log.info(
            "cycle_complete",
            status=status.value,
            records_parsed=len(parse_result.records),
            lines_rejected=parse_result.lines_rejected,
            ranked=len(ranked),
            duration_ms=round(duration_ms, 2),
        )

        return CycleResult(
            cycle_id=cycle_id,
            status=status,
            ranked=ranked,
            records_parsed=len(parse_result.records),
            lines_rejected=parse_result.lines_rejected,
            duration_ms=duration_ms,
        )
