"""Review workflow: idle → analysis_running → pending_review → finalized.

All operator-facing state lives in one ``WorkflowContext``; every
transition goes through a ``ReviewWorkflow`` method that checks the
current phase first. Bucket mutations are delegated to the
ReconciliationEngine.
"""

import threading
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

import structlog

from rollcall.config.settings import get_settings
from rollcall.errors import (
    AnalysisInProgressError,
    InputValidationError,
    InvalidTransitionError,
    NoPendingChangeError,
    WorkflowError,
)
from rollcall.models import (
    AnalysisResult,
    AttendanceStatus,
    Attendee,
    Classification,
    ImagePayload,
    MatchSensitivity,
    ProgressEvent,
    RosterSource,
    WorkflowPhase,
)
from rollcall.oracle import OracleAdapter
from rollcall.pipeline.orchestrator import run_analysis
from rollcall.processing import ReconciliationEngine

logger = structlog.get_logger(__name__)


@dataclass
class WorkflowContext:
    """Everything the operator has set up or selected for one analysis."""

    phase: WorkflowPhase = WorkflowPhase.IDLE
    sensitivity: MatchSensitivity = MatchSensitivity.BALANCED

    # Inputs
    roster_source: RosterSource | None = None
    observation_images: list[ImagePayload] = field(default_factory=list)

    # Run output
    progress_log: list[ProgressEvent] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    error: str | None = None
    last_result: AnalysisResult | None = None

    # Bulk reclassification
    selection: set[str] = field(default_factory=set)
    pending_status: AttendanceStatus | None = None


class ReviewWorkflow:
    """Drives one analysis from inputs to a finalized, editable report."""

    def __init__(
        self,
        adapter: OracleAdapter,
        engine: ReconciliationEngine | None = None,
        sensitivity: MatchSensitivity | None = None,
    ) -> None:
        self.adapter = adapter
        self.engine = engine or ReconciliationEngine()
        self.context = WorkflowContext(sensitivity=sensitivity or get_settings().match_sensitivity)
        self._run_lock = threading.Lock()

    @property
    def phase(self) -> WorkflowPhase:
        return self.context.phase

    def _require_phase(self, *phases: WorkflowPhase, action: str) -> None:
        if self.context.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise InvalidTransitionError(
                f"Cannot {action} while {self.context.phase.value} (allowed: {allowed})"
            )

    # ------------------------------------------------------------------
    # Inputs (idle only)
    # ------------------------------------------------------------------

    def set_roster_source(self, source: RosterSource) -> None:
        self._require_phase(WorkflowPhase.IDLE, action="change the roster")
        self.context.roster_source = source
        self.context.error = None
        logger.debug("roster_source_set", kind=source.kind.value, label=source.label)

    def add_observation_images(self, images: Iterable[ImagePayload]) -> int:
        """Append screenshots; returns how many are queued in total."""
        self._require_phase(WorkflowPhase.IDLE, action="add screenshots")
        self.context.observation_images.extend(images)
        self.context.error = None
        return len(self.context.observation_images)

    def clear_observation_images(self) -> None:
        self._require_phase(WorkflowPhase.IDLE, action="clear screenshots")
        self.context.observation_images.clear()

    def set_sensitivity(self, sensitivity: MatchSensitivity) -> None:
        self._require_phase(WorkflowPhase.IDLE, action="change the matching sensitivity")
        self.context.sensitivity = sensitivity

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def run_analysis(self) -> Iterator[ProgressEvent]:
        """Validate inputs and return the run's progress-event stream.

        Validation happens immediately; the run itself starts when the
        stream is first iterated. Exhausting the stream leaves the workflow
        in ``pending_review``; an error or closing the stream early brings
        it back to ``idle``.

        Raises:
            InvalidTransitionError: The workflow is not idle.
            InputValidationError: Roster or screenshots are missing.
        """
        self._require_phase(WorkflowPhase.IDLE, action="start an analysis")

        ctx = self.context
        if ctx.roster_source is None or not ctx.observation_images:
            ctx.error = "Upload the official roster and at least one meeting screenshot first."
            logger.warning(
                "analysis_inputs_missing",
                has_roster=ctx.roster_source is not None,
                images=len(ctx.observation_images),
            )
            raise InputValidationError(ctx.error)

        return self._run()

    def _run(self) -> Iterator[ProgressEvent]:
        if not self._run_lock.acquire(blocking=False):
            raise AnalysisInProgressError("An analysis is already running")

        ctx = self.context
        try:
            self._require_phase(WorkflowPhase.IDLE, action="start an analysis")
            ctx.phase = WorkflowPhase.ANALYSIS_RUNNING
            ctx.error = None
            ctx.progress_log = []
            ctx.warnings = []

            pipeline = run_analysis(
                ctx.roster_source,
                list(ctx.observation_images),
                self.adapter,
                ctx.sensitivity,
            )
            while True:
                try:
                    event = next(pipeline)
                except StopIteration as stop:
                    result: AnalysisResult = stop.value
                    break
                ctx.progress_log.append(event)
                yield event

            self.engine.ingest(result.classification)
            ctx.last_result = result
            ctx.warnings = list(result.warnings)
            ctx.phase = WorkflowPhase.PENDING_REVIEW

        except GeneratorExit:
            ctx.phase = WorkflowPhase.IDLE
            logger.warning("analysis_abandoned")
            raise
        except InvalidTransitionError:
            raise
        except Exception as e:
            ctx.phase = WorkflowPhase.IDLE
            ctx.error = str(e) or type(e).__name__
            logger.error("analysis_failed", error=ctx.error, type=type(e).__name__)
            raise
        finally:
            self._run_lock.release()

    def analyze(self) -> Classification:
        """Run the analysis to completion and return the review session."""
        for _ in self.run_analysis():
            pass
        return self.engine.session

    # ------------------------------------------------------------------
    # Review (pending_review only)
    # ------------------------------------------------------------------

    def reject_match(self, index: int) -> Attendee:
        self._require_phase(WorkflowPhase.PENDING_REVIEW, action="reject a match")
        return self.engine.reject_match(index)

    def finalize(self) -> Classification:
        self._require_phase(WorkflowPhase.PENDING_REVIEW, action="finalize the report")
        final = self.engine.finalize()
        self.context.phase = WorkflowPhase.FINALIZED
        self.context.selection.clear()
        self.context.pending_status = None
        return final

    # ------------------------------------------------------------------
    # Selection and bulk reclassification (finalized only)
    # ------------------------------------------------------------------

    @property
    def selection(self) -> frozenset[str]:
        return frozenset(self.context.selection)

    def _known_names(self) -> set[str]:
        final = self.engine.final
        return set(final.names()) if final else set()

    def toggle_selection(self, name: str) -> bool:
        """Flip one name in the selection; returns whether it is now selected."""
        self._require_phase(WorkflowPhase.FINALIZED, action="select names")
        if name in self.context.selection:
            self.context.selection.discard(name)
            return False
        if name not in self._known_names():
            raise WorkflowError(f"'{name}' is not in the finalized report")
        self.context.selection.add(name)
        return True

    def select(self, names: Iterable[str]) -> int:
        """Add names to the selection, skipping unknown ones."""
        self._require_phase(WorkflowPhase.FINALIZED, action="select names")
        known = self._known_names()
        for name in names:
            if name in known:
                self.context.selection.add(name)
            else:
                logger.warning("selection_unknown_name", name=name)
        return len(self.context.selection)

    def clear_selection(self) -> None:
        self.context.selection.clear()

    def request_bulk_change(self, target: AttendanceStatus) -> None:
        """Stage a bulk move of the selection; nothing changes until confirmed."""
        self._require_phase(WorkflowPhase.FINALIZED, action="request a bulk change")
        if not self.context.selection:
            raise WorkflowError("Select at least one name before changing statuses")
        self.context.pending_status = target
        logger.debug("bulk_change_staged", target=target.value, selected=len(self.context.selection))

    def confirm_bulk_change(self) -> int:
        """Commit the staged bulk move; returns the number of attendees moved."""
        self._require_phase(WorkflowPhase.FINALIZED, action="confirm a bulk change")
        target = self.context.pending_status
        if target is None:
            raise NoPendingChangeError("No bulk change has been requested")

        moved = self.engine.bulk_reclassify(self.context.selection, target)
        self.context.selection.clear()
        self.context.pending_status = None
        return moved

    def cancel_bulk_change(self) -> None:
        self.context.pending_status = None
        self.context.selection.clear()

    # ------------------------------------------------------------------
    # Views and reset
    # ------------------------------------------------------------------

    def search(self, term: str) -> Classification | None:
        return self.engine.filter_view(term)

    def counts(self) -> dict[AttendanceStatus, int]:
        return self.engine.counts()

    def reset(self, confirmed: bool) -> bool:
        """Start over. Does nothing unless the operator confirmed.

        Raises:
            InvalidTransitionError: An analysis is still running.
        """
        if not confirmed:
            logger.debug("reset_not_confirmed")
            return False
        if self.context.phase == WorkflowPhase.ANALYSIS_RUNNING:
            raise InvalidTransitionError("Cannot reset while an analysis is running")

        self.engine.reset()
        self.context = WorkflowContext(sensitivity=self.context.sensitivity)
        logger.info("workflow_reset")
        return True
