import datetime as dt
import unittest
from zoneinfo import ZoneInfo

from stats.dates import (
    date_key,
    date_range,
    format_timestamp,
    local_date_key,
    parse_timestamp,
    stats_key,
)


class LocalDateKeyTests(unittest.TestCase):
    def test_early_morning_local_time_files_under_local_date(self) -> None:
        taipei = ZoneInfo("Asia/Taipei")
        # 03:00 in Taipei is still the previous day in UTC.
        instant = dt.datetime(2026, 3, 15, 3, 0, tzinfo=taipei)

        self.assertEqual(dt.date(2026, 3, 14), instant.astimezone(dt.timezone.utc).date())
        self.assertEqual(dt.date(2026, 3, 15), local_date_key(instant, taipei))

    def test_utc_instant_is_converted_to_target_zone(self) -> None:
        instant = dt.datetime(2026, 3, 14, 19, 0, tzinfo=dt.timezone.utc)
        self.assertEqual(dt.date(2026, 3, 15), local_date_key(instant, ZoneInfo("Asia/Taipei")))
        self.assertEqual(dt.date(2026, 3, 14), local_date_key(instant, ZoneInfo("America/New_York")))

    def test_naive_instant_is_taken_as_local(self) -> None:
        instant = dt.datetime(2026, 1, 1, 23, 59)
        self.assertEqual(dt.date(2026, 1, 1), local_date_key(instant, ZoneInfo("Asia/Tokyo")))


class DateKeyFormattingTests(unittest.TestCase):
    def test_date_key_is_zero_padded(self) -> None:
        self.assertEqual("2026-02-03", date_key(dt.date(2026, 2, 3)))
        self.assertEqual("stats-2026-02-03", stats_key(dt.date(2026, 2, 3)))

    def test_date_range_is_oldest_first_and_ends_at_end(self) -> None:
        days = date_range(dt.date(2026, 3, 2), 7)

        self.assertEqual(7, len(days))
        self.assertEqual(dt.date(2026, 2, 24), days[0])
        self.assertEqual(dt.date(2026, 3, 2), days[-1])
        self.assertEqual(days, sorted(days))

    def test_date_range_rejects_empty_window(self) -> None:
        with self.assertRaises(ValueError):
            date_range(dt.date(2026, 3, 2), 0)


class TimestampTests(unittest.TestCase):
    def test_format_timestamp_matches_browser_iso_string(self) -> None:
        instant = dt.datetime(2026, 3, 15, 3, 0, 5, 123000, tzinfo=ZoneInfo("Asia/Taipei"))
        self.assertEqual("2026-03-14T19:00:05.123Z", format_timestamp(instant))

    def test_format_timestamp_rounds_sub_milliseconds_up(self) -> None:
        instant = dt.datetime(2026, 3, 15, 10, 0, 0, 999500, tzinfo=ZoneInfo("Asia/Taipei"))

        text = format_timestamp(instant)

        self.assertEqual("2026-03-15T02:00:01.000Z", text)
        self.assertGreaterEqual(parse_timestamp(text), instant)
        self.assertEqual(
            "2026-03-15T02:00:00.124Z",
            format_timestamp(instant.replace(microsecond=123001)),
        )

    def test_parse_timestamp_accepts_z_suffix_and_offsets(self) -> None:
        parsed = parse_timestamp("2026-03-14T19:00:05.123Z")
        self.assertEqual(dt.timezone.utc, parsed.tzinfo)
        self.assertEqual(
            parse_timestamp("2026-03-15T03:00:05.123+08:00"),
            parsed,
        )

    def test_parse_timestamp_rejects_garbage(self) -> None:
        with self.assertRaises(ValueError):
            parse_timestamp("yesterday")


if __name__ == "__main__":
    unittest.main()
