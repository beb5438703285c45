import pytest

from limitless_mcp import Entry, Page, PageMeta, SearchParams, ValidationError
from limitless_mcp.search import entry_matches, filter_page, matching_items

from fakes import content, lifelog, page_response


def ids(page):
    return [e.id for e in page.entries]


@pytest.fixture
def meeting_page(session):
    session.queue(page_response(
        lifelog(id="m", title="Team meeting notes"),
        lifelog(id="g", title="Grocery list"),
    ))


def test_matches_title(client, meeting_page):
    assert ids(client.search_entries(query="meeting")) == ["m"]


def test_match_is_case_insensitive(client, session):
    logs = [lifelog(id="m", title="Team meeting notes"), lifelog(id="g", title="Grocery list")]
    session.queue(page_response(*logs), page_response(*logs))
    upper = client.search_entries(query="MEETING")
    lower = client.search_entries(query="meeting")
    assert ids(upper) == ids(lower) == ["m"]


def test_matches_markdown_and_contents(client, session):
    session.queue(page_response(
        lifelog(id="md", title="Morning", markdown="# Morning\nTalked about the ROADMAP"),
        lifelog(id="ct", title="Lunch", contents=[content("The roadmap slipped", speaker="Ana")]),
        lifelog(id="no", title="Evening", contents=[content("Nothing relevant")]),
    ))
    assert ids(client.search_entries(query="roadmap")) == ["md", "ct"]


def test_no_matches_is_empty_page_not_error(client, meeting_page):
    page = client.search_entries(query="dentist")
    assert page.entries == []


def test_preserves_original_order(client, session):
    session.queue(page_response(
        lifelog(id="3", title="budget c"),
        lifelog(id="1", title="budget a"),
        lifelog(id="x", title="other"),
        lifelog(id="2", title="budget b"),
    ))
    assert ids(client.search_entries(query="budget")) == ["3", "1", "2"]


def test_meta_passes_through_prefilter_count(client, session):
    session.queue(page_response(
        lifelog(id="m", title="Team meeting notes"),
        lifelog(id="g", title="Grocery list"),
        count=40,
        next_cursor="cur-2",
    ))
    page = client.search_entries(query="meeting")
    assert len(page) == 1
    # count still describes the fetched page, not the single match
    assert page.meta.count == 40
    assert page.next_cursor == "cur-2"


def test_only_date_from_cursor_and_limit_are_forwarded(client, session):
    session.queue(page_response())
    client.search_entries(
        query="meeting",
        date_from="2024-05-01",
        date_to="2024-05-07",
        timezone="Europe/Berlin",
        cursor="abc",
        limit=4,
    )
    assert session.calls[0]["params"] == {"date": "2024-05-01", "cursor": "abc", "limit": 4}


def test_without_date_from_fetches_default_window(client, session):
    session.queue(page_response())
    client.search_entries(query="meeting", date_to="2024-05-07", timezone="UTC")
    assert session.calls[0]["params"] == {"limit": 10}


@pytest.mark.parametrize("bad", [
    {"query": ""},
    {"query": "x", "limit": 0},
    {"query": "x", "limit": 11},
    {"query": "x", "date_to": "yesterday"},
    {},
])
def test_invalid_search_params_rejected_before_request(client, session, bad):
    with pytest.raises(ValidationError):
        client.search_entries(**bad)
    assert session.calls == []


def test_accepts_params_object(client, meeting_page):
    assert ids(client.search_entries(SearchParams(query="notes"))) == ["m"]


class TestFilterHelpers:
    def entry(self, **kwargs):
        return Entry.model_validate(lifelog(**kwargs))

    def test_entry_matches_expects_lowercase_query(self):
        e = self.entry(title="Quarterly Review")
        assert entry_matches(e, "review")

    def test_entry_without_markdown(self):
        e = self.entry(title="Walk", contents=[content("saw a heron", kind="text")])
        assert entry_matches(e, "heron")
        assert not entry_matches(e, "eagle")

    def test_matching_items(self):
        e = self.entry(contents=[
            content("Ship it Friday"),
            content("lunch?"),
            content("friday works"),
        ])
        assert [i.content for i in matching_items(e, "FRIDAY")] == ["Ship it Friday", "friday works"]

    def test_filter_page_without_meta(self):
        page = Page(entries=[self.entry(id="a", title="alpha"), self.entry(id="b", title="beta")])
        result = filter_page(page, "ALP")
        assert ids(result) == ["a"]
        assert result.meta is None

    def test_filter_page_keeps_meta_object(self):
        meta = PageMeta(count=2, next_cursor="n")
        page = Page(entries=[self.entry(id="a", title="alpha")], meta=meta)
        assert filter_page(page, "zzz").meta == meta
