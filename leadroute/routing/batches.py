"""Batch bookkeeping for a route session: which leads are next and which are visited."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple, Union

from leadroute.models import Batch, Lead, SalesmanLocation

logger = logging.getLogger(__name__)

BATCH_SIZE = 5
COMPLETE_BATCH = Batch(number=0, leads=())

STATE_IDLE = "idle"
STATE_ACTIVE = "active"
STATE_COMPLETE = "complete"


class UnknownLeadError(KeyError):
    """Raised when marking a lead id that is not part of the session."""


class MalformedSessionError(ValueError):
    """Raised when a saved session file cannot be turned back into a manager."""


class BatchManager:
    """Owns the lead list of one session and hands out batches of unvisited leads.

    One instance per session. Methods are not synchronized; callers sharing
    a manager across threads must serialize ``mark_visited`` and ``reset``.
    """

    def __init__(
        self,
        leads: Iterable[Lead] = (),
        on_batch_complete: Optional[Callable[[], None]] = None,
        origin: Optional[SalesmanLocation] = None,
        first_batch_number: int = 1,
    ) -> None:
        self.on_batch_complete = on_batch_complete
        self.origin: Optional[SalesmanLocation] = None
        self._first_number = 1
        self._leads: Tuple[Lead, ...] = ()
        self._ids: Set[str] = set()
        self._visited: Set[str] = set()
        self._current: Optional[Batch] = None
        self.reset(leads, origin=origin, first_batch_number=first_batch_number)

    @property
    def leads(self) -> Tuple[Lead, ...]:
        return self._leads

    @property
    def visited(self) -> frozenset:
        return frozenset(self._visited)

    @property
    def current_batch(self) -> Optional[Batch]:
        return self._current

    @property
    def is_complete(self) -> bool:
        return bool(self._leads) and len(self._visited) == len(self._leads)

    @property
    def state(self) -> str:
        if not self._leads:
            return STATE_IDLE
        if self.is_complete:
            return STATE_COMPLETE
        return STATE_ACTIVE

    def reset(
        self,
        leads: Iterable[Lead],
        origin: Optional[SalesmanLocation] = None,
        first_batch_number: int = 1,
    ) -> None:
        """Start a new session with ``leads``; visited ids and the current batch are dropped.

        ``origin`` is the salesman location the session plans from. A session
        resumed from a shared route passes that route's number as
        ``first_batch_number`` so numbering carries on from it.
        """
        if first_batch_number < 1:
            raise ValueError("batch numbers start at 1")
        leads = tuple(leads)
        ids = [lead.id for lead in leads]
        if len(set(ids)) != len(ids):
            raise ValueError("lead ids must be unique within a session")
        self._leads = leads
        self._ids = set(ids)
        self._visited = set()
        self._current = None
        self.origin = origin
        self._first_number = first_batch_number
        logger.info("Batch session reset with %d leads", len(leads))

    def is_visited(self, lead_id: str) -> bool:
        return lead_id in self._visited

    def unvisited(self) -> List[Lead]:
        return [lead for lead in self._leads if lead.id not in self._visited]

    def next_batch(self) -> Batch:
        """Return the first ``BATCH_SIZE`` unvisited leads as the next numbered batch.

        An empty batch numbered 0 means every lead has been visited. Asking
        again before anything changes returns the same batch.
        """
        head = tuple(self.unvisited()[:BATCH_SIZE])
        if not head:
            logger.info("All %d leads visited; route complete", len(self._leads))
            return COMPLETE_BATCH

        if self._current is not None and self._current.leads == head:
            return self._current

        number = self._current.number + 1 if self._current is not None else self._first_number
        self._current = Batch(number=number, leads=head)
        logger.info("Issued batch %d with %d leads", number, len(head))
        return self._current

    def mark_visited(self, lead_id: str) -> bool:
        """Mark ``lead_id`` visited. Returns True when the batch-completion threshold fires.

        The threshold is reached whenever the total number of visited leads
        becomes a multiple of ``BATCH_SIZE``, regardless of which batch the
        visited leads belong to.
        """
        if lead_id not in self._ids:
            raise UnknownLeadError(lead_id)
        if lead_id in self._visited:
            return False

        self._visited.add(lead_id)
        logger.debug("Marked %s visited (%d/%d)", lead_id, len(self._visited), len(self._leads))
        if len(self._visited) % BATCH_SIZE != 0:
            return False

        logger.info("Batch completion threshold reached at %d visited leads", len(self._visited))
        if self.on_batch_complete is not None:
            self.on_batch_complete()
        return True

    @property
    def first_batch_number(self) -> int:
        return self._first_number

    def batches(self) -> List[Batch]:
        """Partition every lead into consecutive batches, ignoring visited state."""
        return [
            Batch(number=self._first_number + index // BATCH_SIZE, leads=self._leads[index : index + BATCH_SIZE])
            for index in range(0, len(self._leads), BATCH_SIZE)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allLeads": [lead.to_dict() for lead in self._leads],
            "visited": [lead.id for lead in self._leads if lead.id in self._visited],
            "currentBatch": self._current.to_dict() if self._current is not None else None,
            "origin": self.origin.to_dict() if self.origin is not None else None,
            "firstBatchNumber": self._first_number,
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        on_batch_complete: Optional[Callable[[], None]] = None,
    ) -> "BatchManager":
        origin = data.get("origin")
        manager = cls(
            (Lead.from_dict(item) for item in data.get("allLeads") or []),
            on_batch_complete,
            origin=SalesmanLocation.from_dict(origin) if origin else None,
            first_batch_number=int(data.get("firstBatchNumber") or 1),
        )
        for lead_id in data.get("visited") or []:
            if lead_id in manager._ids:
                manager._visited.add(lead_id)
            else:
                logger.warning("Dropping unknown visited id %s from saved session", lead_id)
        current = data.get("currentBatch")
        if current:
            manager._current = Batch.from_dict(current)
        return manager


def save_session(path: Union[str, Path], manager: BatchManager) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as fh:
        json.dump(manager.to_dict(), fh, ensure_ascii=False, indent=2)
    logger.info("Saved session to %s", str(target))
    return target


def load_session(path: Union[str, Path]) -> BatchManager:
    """Load a saved session; a missing file yields an idle manager."""
    source = Path(path)
    if not source.exists():
        logger.info("No saved session at %s; starting idle", str(source))
        return BatchManager()
    try:
        with source.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise TypeError("session must be a JSON object")
        return BatchManager.from_dict(data)
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as exc:
        logger.error("Saved session at %s is unreadable: %s", str(source), exc)
        raise MalformedSessionError(f"session file {source} is malformed: {exc}") from exc
