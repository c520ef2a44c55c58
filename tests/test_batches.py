import pytest

from leadroute.models import GeoPoint, Lead
from leadroute.routing import batches
from leadroute.routing.areas import get_salesman_location
from leadroute.routing.batches import BATCH_SIZE, BatchManager, UnknownLeadError


def _leads(count, prefix="lead"):
    return [Lead(id=f"{prefix}-{index}", name=f"Shop {index}", location=GeoPoint(21.0, 72.0 + index / 100)) for index in range(count)]


def _visit_all(manager, batch):
    fired = [manager.mark_visited(lead.id) for lead in batch.leads]
    return fired


def test_new_manager_is_idle():
    manager = BatchManager()
    assert manager.state == batches.STATE_IDLE
    assert manager.next_batch().is_empty


def test_batches_are_sequential_until_complete():
    manager = BatchManager(_leads(12))
    sizes, numbers = [], []

    while True:
        batch = manager.next_batch()
        if batch.is_empty:
            break
        sizes.append(len(batch))
        numbers.append(batch.number)
        _visit_all(manager, batch)

    assert sizes == [5, 5, 2]
    assert numbers == [1, 2, 3]
    assert manager.state == batches.STATE_COMPLETE
    assert manager.next_batch().number == 0


def test_threshold_fires_after_full_batch_and_advances():
    leads = _leads(12)
    completions = []
    manager = BatchManager(leads, on_batch_complete=lambda: completions.append(True))

    first = manager.next_batch()
    fired = _visit_all(manager, first)

    assert fired == [False, False, False, False, True]
    assert completions == [True]
    second = manager.next_batch()
    assert second.number == 2
    assert list(second.leads) == leads[5:10]


def test_mark_visited_is_idempotent():
    manager = BatchManager(_leads(6))
    for lead_id in ["lead-0", "lead-1", "lead-2", "lead-3"]:
        manager.mark_visited(lead_id)

    assert manager.mark_visited("lead-3") is False
    assert len(manager.visited) == 4
    assert manager.mark_visited("lead-4") is True


def test_out_of_batch_visits_count_toward_threshold():
    manager = BatchManager(_leads(12))
    manager.next_batch()

    fired = [manager.mark_visited(f"lead-{index}") for index in range(7, 12)]

    assert fired[-1] is True
    assert manager.next_batch().ids == ("lead-0", "lead-1", "lead-2", "lead-3", "lead-4")


def test_next_batch_is_stable_until_state_changes():
    manager = BatchManager(_leads(7))
    first = manager.next_batch()

    assert manager.next_batch() is first

    manager.mark_visited("lead-0")
    partial = manager.next_batch()
    assert partial.number == 2
    assert partial.ids == ("lead-1", "lead-2", "lead-3", "lead-4", "lead-5")


def test_unknown_lead_is_rejected():
    manager = BatchManager(_leads(2))
    with pytest.raises(UnknownLeadError):
        manager.mark_visited("missing")
    assert manager.visited == frozenset()


def test_reset_starts_over():
    manager = BatchManager(_leads(8))
    first = manager.next_batch()
    _visit_all(manager, first)
    manager.next_batch()

    fresh = _leads(3, prefix="new")
    manager.reset(fresh)

    assert manager.visited == frozenset()
    assert manager.current_batch is None
    batch = manager.next_batch()
    assert batch.number == 1
    assert list(batch.leads) == fresh


def test_reset_rejects_duplicate_ids():
    lead = Lead(id="dup")
    with pytest.raises(ValueError):
        BatchManager([lead, lead])


def test_static_partition():
    parts = BatchManager(_leads(11)).batches()
    assert [(batch.number, len(batch)) for batch in parts] == [(1, BATCH_SIZE), (2, BATCH_SIZE), (3, 1)]


def test_session_round_trip(tmp_path):
    manager = BatchManager(_leads(7))
    manager.next_batch()
    manager.mark_visited("lead-2")

    data = manager.to_dict()
    assert data["visited"] == ["lead-2"]
    assert data["currentBatch"]["batchNumber"] == 1

    path = batches.save_session(tmp_path / "session.json", manager)
    restored = batches.load_session(path)

    assert restored.leads == manager.leads
    assert restored.visited == manager.visited
    assert restored.current_batch == manager.current_batch
    assert restored.next_batch().number == 2


def test_load_missing_session_is_idle(tmp_path):
    assert batches.load_session(tmp_path / "absent.json").state == batches.STATE_IDLE


def test_from_dict_drops_unknown_visited_ids():
    manager = BatchManager(_leads(2))
    data = manager.to_dict()
    data["visited"] = ["lead-0", "ghost"]

    restored = BatchManager.from_dict(data)

    assert restored.visited == frozenset({"lead-0"})


def test_is_visited_tracks_membership():
    manager = BatchManager(_leads(3))
    manager.mark_visited("lead-1")

    assert manager.is_visited("lead-1") is True
    assert manager.is_visited("lead-0") is False
    assert manager.is_visited("missing") is False


def test_numbering_continues_from_first_batch_number():
    origin = get_salesman_location("Mota Varachha")
    manager = BatchManager(_leads(7), origin=origin, first_batch_number=3)

    first = manager.next_batch()
    _visit_all(manager, first)

    assert first.number == 3
    assert manager.next_batch().number == 4
    assert [batch.number for batch in manager.batches()] == [3, 4]


def test_session_keeps_origin_and_numbering(tmp_path):
    origin = get_salesman_location("Mota Varachha")
    manager = BatchManager(_leads(7), origin=origin, first_batch_number=3)

    restored = batches.load_session(batches.save_session(tmp_path / "session.json", manager))

    assert restored.origin == origin
    assert restored.first_batch_number == 3
    assert restored.next_batch().number == 3


def test_reset_clears_origin_and_numbering():
    manager = BatchManager(_leads(2), origin=get_salesman_location("Adajan"), first_batch_number=4)
    manager.reset(_leads(2, prefix="new"))

    assert manager.origin is None
    assert manager.next_batch().number == 1


@pytest.mark.parametrize(
    "content",
    [
        '{"allLeads": [{"name": "no id"}]}',
        '{"allLeads": [{"id": "a", "location": {"lng": 72.8}}]}',
        '["not", "an", "object"]',
        "{broken",
    ],
)
def test_load_malformed_session(tmp_path, content):
    path = tmp_path / "session.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(batches.MalformedSessionError):
        batches.load_session(path)
