"""Shared fixtures: in-memory DuckDB, fake clocks, a populated registry."""

from datetime import datetime, timedelta

import duckdb
import pytest

from statkit.models import DAY_RANGE, DEFAULT, TableModel, TimeWindow
from statkit.repositories import MemoryStore, QueryEngine
from statkit.services import FilterRuleResolver, RetryPolicy, StatisticRegistry, TTLCache

# Friday; its week runs Monday 2024-03-11 to Sunday 2024-03-17.
FIXED_NOW = datetime(2024, 3, 15, 12, 30)

MOCK_DDL = """
CREATE TABLE mock_models (
    id INTEGER PRIMARY KEY,
    channel VARCHAR,
    amount INTEGER,
    user_id INTEGER,
    blah VARCHAR,
    value INTEGER,
    price DECIMAL(10, 2),
    created_at TIMESTAMP
)
"""

USERS_DDL = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY,
    active BOOLEAN
)
"""

MOCK_MODEL = TableModel(
    name="MockModel",
    table="mock_models",
    scopes={
        "big_value": "value > 5",
        "positive": lambda query: query.where("amount > 0"),
    },
)


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingEngine(QueryEngine):
    """Query engine that counts executed aggregates."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = 0

    def fetchone(self, query, params=None):
        self.calls += 1
        return super().fetchone(query, params)


@pytest.fixture
def conn():
    connection = duckdb.connect(":memory:")
    connection.execute(MOCK_DDL)
    connection.execute(USERS_DDL)
    yield connection
    connection.close()


@pytest.fixture
def insert(conn):
    """Insert mock_models rows given as dicts; ids are assigned in order."""
    counter = {"id": 0}

    def _insert(*rows: dict) -> None:
        for row in rows:
            counter["id"] += 1
            values = {
                "id": counter["id"],
                "channel": None,
                "amount": 0,
                "user_id": None,
                "blah": None,
                "value": 0,
                "created_at": FIXED_NOW,
                **row,
            }
            columns = ", ".join(values)
            marks = ", ".join("?" for _ in values)
            conn.execute(f"INSERT INTO mock_models ({columns}) VALUES ({marks})", list(values.values()))

    return _insert


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(conn):
    return CountingEngine(read_only=False, conn=conn)


@pytest.fixture
def no_sleep():
    return RetryPolicy(max_attempts=3, base_interval=0.01, sleep=lambda _: None)


@pytest.fixture
def registry(engine, clock, no_sleep):
    registry = StatisticRegistry(
        model=MOCK_MODEL,
        engine=engine,
        cache=TTLCache(MemoryStore(), clock=clock),
        retry=no_sleep,
        resolver=FilterRuleResolver(clock=lambda: FIXED_NOW),
        now=lambda: FIXED_NOW,
    )

    registry.define("Basic Count", count="all")
    registry.define("symbol_count", count="all")
    registry.define("Basic Sum", sum="all", column="amount")
    registry.define("Chained Scope Count", count=["all", "big_value"])
    registry.define("Default Filter", count="all")
    registry.define(
        "Custom Filter",
        count="all",
        filter_on={"channel": "channel = ?", "start_date": "CAST(created_at AS DATE) > ?", "blah": "blah = ?"},
    )
    registry.define(
        "Array Condition Sql",
        count="all",
        conditions=[
            {"channel": "5"},
            {"created_at": TimeWindow(datetime(2024, 3, 11), datetime(2024, 3, 17, 23, 59, 59, 999999))},
        ],
    )
    registry.define("Default Sql Filter", count="all", filter_on={"channel": DEFAULT, "created_at": DEFAULT})
    registry.define(
        "Filter In Conditions",
        count="all",
        conditions=[
            lambda filters: "amount > 0"
            if filters.get("channel") and int(filters["channel"]) > 10
            else "amount < 0",
        ],
        filter_on={"channel": DEFAULT, "created_at": DEFAULT},
    )
    registry.define("Day Range Sql Filter", count="all", filter_on={"channel": DEFAULT, "created_at": DAY_RANGE})
    registry.define("Indirect Filter", count="all", filter_on={"channel": DEFAULT, "on": ("created_at", DAY_RANGE)})
    registry.define("Cached", count="all", filter_on={"channel": "channel = ?", "blah": "blah = ?"}, cache_for=1)
    registry.define(
        "Dynamic Cached",
        count="all",
        filter_on={"channel": "channel = ?", "blah": "blah = ?"},
        cache_for=lambda filters: timedelta(minutes=5) if filters.get("channel") == "chan5" else timedelta(0),
    )
    registry.define_calculated("Total Amount", lambda stat: stat("Basic Sum") * stat("Basic Count"))

    registry.filter_all_on("user_id", "user_id = ?")
    return registry
