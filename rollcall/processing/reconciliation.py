"""Reconciliation engine: the only place attendee buckets are mutated.

Two classifications live here:

- the *review session*, the raw oracle result pending human confirmation,
  changed only by ``reject_match``;
- the *finalized* classification, produced once per session by
  ``finalize`` and changed only by ``bulk_reclassify``.

Every mutation rebuilds the affected classification completely and swaps it
in under one lock, so readers never see a half-sorted bucket and a failed
operation never leaves partial state behind. Read accessors hand out deep
copies.
"""

import threading
from collections.abc import Iterable

import structlog

from rollcall.errors import InvalidIndexError, NoActiveSessionError
from rollcall.models import AttendanceStatus, Attendee, Classification

from .collation import sort_attendees

logger = structlog.get_logger(__name__)

# When the same name lands in more than one bucket, the earlier bucket keeps it
BUCKET_PRECEDENCE = (
    AttendanceStatus.PRESENT,
    AttendanceStatus.ABSENT,
    AttendanceStatus.UNEXPECTED,
)


def _sorted_classification(buckets: dict[AttendanceStatus, list[Attendee]]) -> Classification:
    return Classification(
        present=sort_attendees(buckets.get(AttendanceStatus.PRESENT, [])),
        absent=sort_attendees(buckets.get(AttendanceStatus.ABSENT, [])),
        unexpected=sort_attendees(buckets.get(AttendanceStatus.UNEXPECTED, [])),
    )


def enforce_disjoint(raw: Classification) -> Classification:
    """Drop duplicate names and sort every bucket.

    Duplicates inside a bucket keep their first occurrence; across buckets
    the order of ``BUCKET_PRECEDENCE`` decides. Each attendee's status is
    set to the bucket it ends up in.

    Args:
        raw: Classification as mapped from the oracle response.

    Returns:
        A new, sorted, disjoint Classification.
    """
    seen: set[str] = set()
    buckets: dict[AttendanceStatus, list[Attendee]] = {}

    for status in BUCKET_PRECEDENCE:
        kept = []
        for attendee in raw.bucket(status):
            if attendee.name in seen:
                logger.warning("duplicate_name_dropped", name=attendee.name, bucket=status.value)
                continue
            seen.add(attendee.name)
            kept.append(attendee.model_copy(update={"status": status}))
        buckets[status] = kept

    return _sorted_classification(buckets)


class ReconciliationEngine:
    """Owns the review session and the finalized classification."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._session: Classification | None = None
        self._final: Classification | None = None

    # ------------------------------------------------------------------
    # Read views
    # ------------------------------------------------------------------

    @property
    def has_session(self) -> bool:
        with self._lock:
            return self._session is not None

    @property
    def is_finalized(self) -> bool:
        with self._lock:
            return self._final is not None

    @property
    def session(self) -> Classification | None:
        """Copy of the review session, or None."""
        with self._lock:
            return self._session.model_copy(deep=True) if self._session else None

    @property
    def final(self) -> Classification | None:
        """Copy of the finalized classification, or None."""
        with self._lock:
            return self._final.model_copy(deep=True) if self._final else None

    def counts(self) -> dict[AttendanceStatus, int]:
        """Bucket sizes of the finalized classification, else of the session."""
        with self._lock:
            current = self._final or self._session
            if current is None:
                return {status: 0 for status in AttendanceStatus}
            return current.counts()

    def filter_view(self, term: str) -> Classification | None:
        """Finalized buckets restricted to attendees matching ``term``.

        Case-insensitive substring search over ``name`` and ``original_name``.
        Never changes bucket membership. Returns None before finalization.
        """
        with self._lock:
            if self._final is None:
                return None
            final = self._final.model_copy(deep=True)

        term = term.strip()
        if not term:
            return final
        return Classification(
            present=[a for a in final.present if a.matches(term)],
            absent=[a for a in final.absent if a.matches(term)],
            unexpected=[a for a in final.unexpected if a.matches(term)],
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def ingest(self, raw: Classification) -> Classification:
        """Store a raw oracle classification as the active review session.

        Replaces any prior session. Returns a copy of what was stored.
        """
        session = enforce_disjoint(raw)
        with self._lock:
            replaced = self._session is not None
            self._session = session

        logger.info(
            "classification_ingested",
            present=len(session.present),
            absent=len(session.absent),
            unexpected=len(session.unexpected),
            replaced_session=replaced,
        )
        return session.model_copy(deep=True)

    def reject_match(self, index: int) -> Attendee:
        """Undo one proposed match in the review session.

        The roster name goes back to ``absent`` and the observed form it was
        matched with goes to ``unexpected``. The observed form is skipped when
        it is missing or the exact name already sits in a bucket, so buckets
        stay disjoint. In particular, when the observed form equals the roster
        name, the observation is lost: only the absent entry remains.

        Args:
            index: Position in the session's ``present`` bucket.

        Returns:
            The rejected attendee as it was in ``present``.

        Raises:
            NoActiveSessionError: No review session exists.
            InvalidIndexError: ``index`` is outside ``present``.
        """
        with self._lock:
            session = self._require_session()
            if not 0 <= index < len(session.present):
                logger.warning("reject_index_out_of_range", index=index, present=len(session.present))
                raise InvalidIndexError(
                    f"No present match at index {index} (present has {len(session.present)} entries)"
                )

            match = session.present[index]
            present = session.present[:index] + session.present[index + 1:]
            absent = [*session.absent, Attendee(name=match.name, status=AttendanceStatus.ABSENT)]
            unexpected = list(session.unexpected)

            observed = (match.original_name or "").strip()
            taken = {a.name for a in (*present, *absent, *unexpected)}
            if observed and observed not in taken:
                unexpected.append(Attendee(name=observed, status=AttendanceStatus.UNEXPECTED))
            else:
                logger.debug("rejected_observation_not_reinserted", name=match.name, observed=observed)

            self._session = Classification(
                present=present,
                absent=sort_attendees(absent),
                unexpected=sort_attendees(unexpected),
            )

        logger.info("match_rejected", name=match.name, original_name=match.original_name)
        return match.model_copy()

    def finalize(self) -> Classification:
        """Promote the review session to the finalized classification.

        The session is consumed: a second call without a new ``ingest``
        raises ``NoActiveSessionError``.
        """
        with self._lock:
            session = self._require_session()
            self._final = session
            self._session = None

        logger.info("classification_finalized", **{s.value: n for s, n in session.counts().items()})
        return session.model_copy(deep=True)

    def bulk_reclassify(self, names: Iterable[str], target: AttendanceStatus) -> int:
        """Move every finalized attendee whose name is in ``names`` to ``target``.

        Moved attendees keep their ``original_name``; their status is
        overwritten. All buckets are re-sorted.

        Returns:
            Number of attendees now carrying the target status because of
            this call (including ones already there).

        Raises:
            NoActiveSessionError: Nothing has been finalized yet.
        """
        selected = set(names)
        with self._lock:
            if self._final is None:
                raise NoActiveSessionError("No finalized classification to reclassify")

            buckets: dict[AttendanceStatus, list[Attendee]] = {status: [] for status in AttendanceStatus}
            moved = 0
            for status in AttendanceStatus:
                for attendee in self._final.bucket(status):
                    if attendee.name in selected:
                        buckets[target].append(attendee.model_copy(update={"status": target}))
                        moved += 1
                    else:
                        buckets[status].append(attendee)

            self._final = _sorted_classification(buckets)

        logger.info("bulk_reclassified", target=target.value, selected=len(selected), moved=moved)
        return moved

    def reset(self) -> None:
        """Discard the session and the finalized classification."""
        with self._lock:
            self._session = None
            self._final = None
        logger.info("engine_reset")

    def _require_session(self) -> Classification:
        if self._session is None:
            raise NoActiveSessionError("No active review session")
        return self._session
