from .backends import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore
from .chart import ChartBar, weekly_chart
from .cursor import DateCursor
from .dates import local_date_key
from .records import DailyCounts, DailyStats, PhaseRecord
from .store import StatisticsStore, WindowCount

__all__ = [
    "ChartBar",
    "DailyCounts",
    "DailyStats",
    "DateCursor",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "PhaseRecord",
    "StatisticsStore",
    "WindowCount",
    "local_date_key",
    "weekly_chart",
]
