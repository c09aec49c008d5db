from datetime import datetime, timezone

import pytest

from conftest import make_event, make_link
from linkdash.services import stats
from linkdash.services.aggregation import format_timestamp

PREFIX = "/api/v1"

NOW = datetime(2024, 3, 31, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def seeded(store):
    store.add_links(
        [
            make_link("acme", "u1", status="active"),
            make_link("acme", "u2", status="expired"),
            make_link("globex", "g1", status="active"),
        ]
    )
    store.create_brand("initech", created_at="2024-03-01T00:00:00.000Z")
    store.add_events(
        [
            make_event("t1", "2024-03-31T08:00:00.000Z", country="US"),
            make_event("t1", "2024-03-31T08:01:00.000Z", country="US", event_type="page_view"),
            make_event("t2", "2024-03-30T23:59:59.000Z", country="DE"),
            make_event("t3", "2024-03-28T10:00:00.000Z"),
            make_event("t4", "2024-01-15T10:00:00.000Z", country="US"),
        ]
    )
    return store


def test_window_start_is_midnight():
    assert stats.window_start(30, NOW) == datetime(2024, 3, 1, tzinfo=timezone.utc)


def test_overview(seeded):
    o = stats.overview(seeded, days=30, now=NOW)
    assert o.total_brands == 3
    assert o.total_links == 3
    assert o.active_links == 2
    assert o.total_events == 4
    assert o.total_clicks == 3
    assert o.window_days == 30


def test_clicks_over_time_zero_filled(seeded):
    series = stats.clicks_over_time(seeded, days=3, now=NOW)
    assert [(d.date, d.count) for d in series] == [
        ("2024-03-29", 0),
        ("2024-03-30", 1),
        ("2024-03-31", 1),
    ]


def test_country_distribution(seeded):
    got = [(c.country, c.count) for c in stats.country_distribution(seeded)]
    assert got[0] == ("US", 3)
    assert set(got[1:]) == {("DE", 1), ("unknown", 1)}


def test_event_type_distribution(seeded):
    got = [(t.type, t.count) for t in stats.event_type_distribution(seeded)]
    assert got == [("click", 4), ("page_view", 1)]


def test_stats_endpoints(client, store):
    now = format_timestamp(datetime.now(timezone.utc))
    store.add_links([make_link("acme", "u1")])
    store.add_events([make_event("t1", now, country="FR"), make_event("t2", now, event_type="scroll")])

    overview = client.get(f"{PREFIX}/stats/overview").json()
    assert overview == {
        "total_brands": 1,
        "total_links": 1,
        "active_links": 1,
        "total_events": 2,
        "total_clicks": 1,
        "window_days": 30,
    }

    clicks = client.get(f"{PREFIX}/stats/clicks", params={"days": 7}).json()
    assert len(clicks) == 7
    assert clicks[-1] == {"date": now[:10], "count": 1}

    assert {"country": "FR", "count": 1} in client.get(f"{PREFIX}/stats/countries").json()
    assert {t["type"] for t in client.get(f"{PREFIX}/stats/event-types").json()} == {"click", "scroll"}


def test_clicks_days_bounds(client):
    assert client.get(f"{PREFIX}/stats/clicks", params={"days": 0}).status_code == 400
