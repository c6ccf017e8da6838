"""
Tests for event filtering, day layout and paginated search.
"""

from datetime import date

from app.search.factory import create_search_module
from app.search.models import Pagination, TagCloud, clamp_page
from app.search.services import (
    EventFilter,
    SearchService,
    build_day_cell,
    collect_tags,
    events_for_day,
    sort_search_results,
)
from calendar_service.models import EventRecord


def make_event(title, start, end=None, sequence=0, games=None, tags=None, summary=""):
    start_date = date.fromisoformat(start)
    return EventRecord(
        id=f"{title}-{start}-{sequence}",
        title=title,
        start_date=start_date,
        end_date=date.fromisoformat(end) if end else start_date,
        games=games or ["Unknown"],
        tags=tags or [],
        summary=summary,
        sequence=sequence,
    )


class TestEventFilter:
    """Test the text and tag filters."""

    def setup_method(self):
        self.events = [
            make_event("Chess Finals", "2024-01-05", sequence=0, games=["Chess"], tags=["finals"]),
            make_event("Go Night", "2024-01-06", sequence=1, games=["Go"], tags=["casual"]),
            make_event("Charity Stream", "2024-01-07", sequence=2, tags=["charity", "finals"],
                       summary="Raising money for **Chess** clubs"),
        ]

    def test_blank_query_returns_all_in_order(self):
        assert EventFilter.filter_events(self.events, "") == self.events
        assert EventFilter.filter_events(self.events, "   ") == self.events

    def test_query_is_case_insensitive_across_fields(self):
        titles = [e.title for e in EventFilter.filter_events(self.events, "cHeSs")]
        assert titles == ["Chess Finals", "Charity Stream"]

    def test_query_matches_tags_and_games(self):
        assert [e.title for e in EventFilter.filter_events(self.events, "casual")] == ["Go Night"]
        assert [e.title for e in EventFilter.filter_events(self.events, "go")] == ["Go Night"]

    def test_tag_is_exact_membership_and_combines_with_query(self):
        by_tag = EventFilter.filter_events(self.events, tag="finals")
        assert [e.title for e in by_tag] == ["Chess Finals", "Charity Stream"]

        both = EventFilter.filter_events(self.events, query="stream", tag="finals")
        assert [e.title for e in both] == ["Charity Stream"]

        assert EventFilter.filter_events(self.events, tag="final") == []

    def test_no_match(self):
        assert EventFilter.filter_events(self.events, "tennis") == []


class TestDayLayout:
    """Test per-day event lists and display caps."""

    def test_events_for_day_orders_by_sequence_and_spans_days(self):
        events = [
            make_event("Late", "2024-03-10", sequence=5),
            make_event("Multi", "2024-03-08", end="2024-03-11", sequence=1),
            make_event("Other day", "2024-03-12", sequence=0),
        ]

        titles = [e.title for e in events_for_day(events, date(2024, 3, 10))]
        assert titles == ["Multi", "Late"]
        assert [e.title for e in events_for_day(events, date(2024, 3, 11))] == ["Multi"]

    def test_day_cell_caps_at_three_with_hidden_count(self):
        events = [make_event(f"E{i}", "2024-03-10", sequence=i) for i in range(5)]

        cell = build_day_cell(events, date(2024, 3, 10))

        assert [e.title for e in cell.events] == ["E0", "E1", "E2"]
        assert cell.hidden_count == 2
        assert cell.total == 5
        assert cell.to_dict()["hidden_count"] == 2

    def test_day_cell_without_overflow(self):
        events = [make_event("Only", "2024-03-10")]

        cell = build_day_cell(events, date(2024, 3, 10), in_current_month=False)

        assert cell.hidden_count == 0
        assert not cell.in_current_month
        assert build_day_cell(events, date(2024, 3, 11)).events == []


class TestSearchResults:
    """Test result ordering and pagination."""

    def test_sort_newest_first_with_sequence_tiebreak(self):
        events = [
            make_event("Old", "2023-05-01", sequence=0),
            make_event("New B", "2024-05-01", sequence=3),
            make_event("New A", "2024-05-01", sequence=1),
        ]

        assert [e.title for e in sort_search_results(events)] == ["New A", "New B", "Old"]

    def test_page_slices_concatenate_to_full_list(self):
        service = SearchService(page_size=10)
        events = [make_event(f"E{i:02d}", "2024-01-01", sequence=i) for i in range(23)]
        results = service.search(events)

        pagination = service.paginate(results, 1)
        assert pagination.total_pages == 3

        pages = [service.page_slice(results, page) for page in range(1, pagination.total_pages + 1)]
        assert [len(p) for p in pages] == [10, 10, 3]
        assert [e for page in pages for e in page] == results

    def test_page_is_clamped(self):
        service = SearchService(page_size=10)
        results = [make_event(f"E{i}", "2024-01-01", sequence=i) for i in range(12)]

        assert service.paginate(results, 9).page == 2
        assert service.paginate(results, 0).page == 1
        assert service.paginate(results, -3).page == 1

    def test_empty_results_still_have_one_page(self):
        pagination = SearchService().paginate([], 4)

        assert pagination.total_pages == 1
        assert pagination.page == 1
        assert pagination.get_page_items([]) == []

    def test_page_size_is_at_least_one(self):
        assert SearchService(page_size=0).page_size == 1
        assert Pagination(5, per_page=0).total_pages == 5

    def test_clamp_page(self):
        assert clamp_page(3, 2) == 2
        assert clamp_page(1, 0) == 1

    def test_factory(self):
        module = create_search_module(page_size=4)
        assert module["service"].page_size == 4
        assert module["filter"] is EventFilter


class TestTags:
    """Test the tag cloud."""

    def test_collect_tags_orders_by_count_then_name(self):
        events = [
            make_event("A", "2024-01-01", tags=["finals", "charity"]),
            make_event("B", "2024-01-02", tags=["finals"]),
            make_event("C", "2024-01-03", tags=["anniversary"]),
        ]

        assert collect_tags(events) == [
            {"name": "finals", "count": 2},
            {"name": "anniversary", "count": 1},
            {"name": "charity", "count": 1},
        ]

    def test_tag_cloud_query(self):
        cloud = TagCloud()
        cloud.add_event(make_event("A", "2024-01-01", tags=["Finals", "charity"]))

        assert cloud.get_tag_cloud("fin") == [{"name": "Finals", "count": 1}]
