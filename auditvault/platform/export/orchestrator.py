"""Export orchestrator: Plan -> Fetch -> Write -> Commit.

The checkpoint is committed strictly after the archive write succeeds (or is skipped for
an empty window). A crash before the commit is safe to retry; a crash after the commit
never re-exports the window.

Failure policy:
    - checkpoint lookup, fetch or write failure: FATAL, raise, checkpoint untouched
    - commit failure: log and report; the next cycle repeats the window (duplicate, no gap)

There is no lock on the checkpoint position. Two cycles started from the same stale
checkpoint both export the same window and both write an archive; this is accepted for a
single-writer scheduled job.
"""

from datetime import timedelta
from typing import Optional

from auditvault.platform.export.context import ExportContext
from auditvault.platform.export.exceptions import CheckpointCommitError, ExportFailedError
from auditvault.schemas.checkpoint import Checkpoint, partition_for
from auditvault.schemas.export import ExportResult, ExportState


class ExportOrchestrator:
    """Runs one export cycle at a time against an ExportContext."""

    def __init__(self, context: ExportContext):
        """Initialize with a fully built context."""
        self.context = context
        self.state = ExportState.IDLE

    def _transition(self, state: ExportState) -> None:
        self.context.logger.debug(f"Export state {self.state.value} -> {state.value}")
        self.state = state

    async def find_latest_checkpoint(self) -> Optional[Checkpoint]:
        """Newest checkpoint in today's partition, then up to ``lookback_days`` earlier ones.

        Returns None (cold start) when every consulted partition is empty.
        """
        today = self.context.now()
        for days_back in range(self.context.lookback_days + 1):
            event_date = partition_for(today - timedelta(days=days_back), self.context.tz)
            checkpoint = await self.context.checkpoint_store.get_latest(event_date)
            if checkpoint is not None:
                return checkpoint
        return None

    async def run(self) -> ExportResult:
        """Run a single cycle.

        Raises:
            ExportFailedError: If planning, fetching or writing fails. The checkpoint has
                not been advanced.
        """
        ctx = self.context
        try:
            self._transition(ExportState.PLANNING)
            previous = await self.find_latest_checkpoint()
            window = ctx.planner.next_window(previous, ctx.now())
            log = ctx.logger.with_context(organization=ctx.organization, window=str(window))
            if previous is None:
                log.info("No checkpoint found, starting from now")
            else:
                log.info(
                    f"Resuming after {previous.window}, "
                    f"checkpoint created at {previous.created_at.isoformat()}"
                )

            self._transition(ExportState.FETCHING)
            batch = await ctx.fetcher.fetch_all(window)

            self._transition(ExportState.WRITING)
            location = await ctx.writer.write(batch, ctx.now())
        except Exception as e:
            self._transition(ExportState.FATAL)
            ctx.logger.error(
                f"Export cycle failed, checkpoint not advanced: {e}",
                exc_info=not isinstance(e, ExportFailedError),
            )
            raise

        self._transition(ExportState.COMMITTING)
        checkpoint = Checkpoint.for_window(window, created_at=ctx.now(), tz=ctx.tz)
        committed = True
        commit_error = None
        try:
            await ctx.checkpoint_store.put(checkpoint)
        except CheckpointCommitError as e:
            committed = False
            commit_error = str(e)
            log.error(
                f"could not insert next checkpoint: {e}; "
                f"the next run will export this window again"
            )
        else:
            log.info(f"Checkpoint advanced to {checkpoint.window_end.isoformat()}")

        self._transition(ExportState.IDLE)
        return ExportResult(
            window=window,
            record_count=len(batch),
            location=location,
            checkpoint=checkpoint,
            checkpoint_committed=committed,
            state=self.state,
            commit_error=commit_error,
        )
