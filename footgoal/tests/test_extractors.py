import datetime as dt
import json
import unittest
from pathlib import Path
import sys

TESTS_DIR = Path(__file__).resolve().parent
PROJECT_DIR = TESTS_DIR.parent.parent
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

from footgoal.extractors import (
    CardLinkExtractor,
    HeuristicRowExtractor,
    NextDataExtractor,
    SlugRowExtractor,
    clean_title,
    extract_link_id,
    title_from_match_slug,
    walk_next_data,
)
from footgoal.http_client import parse_html
from footgoal.models import Event, make_channel


NOW = dt.datetime(2026, 10, 18, 15, 0)

ROWS_HTML = """
<html><body>
  <div class="row">14:00 Arsenal vs Manchester City <a href="/stream/stream-302.php">Sky Sports</a> <a href="/watch.php?id=491">beIN 1</a></div>
  <div class="row">16:30 Real Madrid vs Barcelona <a href="https://mirror.test/cast/stream-401.php">DAZN</a></div>
  <div class="row">14:00 Arsenal vs Manchester City <a href="/stream/stream-999.php">Mirror</a></div>
  <li>18:45 <a href="/stream/stream-600.php">Liverpool vs Everton</a></li>
  <div class="row">20:00 Liverpool vs Chelsea LIVE <a href="/ch/700.php">HD</a></div>
  <div class="row">24/7 Channels 00:00 <a href="/stream/stream-1.php">All</a></div>
  <div class="row">21:00 Ajax vs PSV <a href="/about">About</a></div>
  <p>Schedule updated 12:00 daily</p>
</body></html>
"""


class HelperTests(unittest.TestCase):
    def test_link_id_patterns(self):
        self.assertEqual(extract_link_id("https://x.test/stream/stream-44.php"), "44")
        self.assertEqual(extract_link_id("/watch.php?id=12"), "12")
        self.assertEqual(extract_link_id("/ch/77.php"), "77")
        self.assertIsNone(extract_link_id("/match/some-slug"))
        self.assertEqual(extract_link_id("/match/some-slug/", slug_fallback=True), "some-slug")
        self.assertIsNone(extract_link_id(""))

    def test_clean_title_keeps_words_containing_noise(self):
        self.assertEqual(clean_title("20:00 Liverpool Live Stream", "20:00"), "Liverpool")
        self.assertEqual(clean_title("20:00 - Livestock FC vs Streamwood |", "20:00"), "Livestock FC vs Streamwood")

    def test_title_from_slug(self):
        self.assertEqual(
            title_from_match_slug("slg-Brighton-and-Hove-Albion-vs-Everton-3duPQw"),
            "Brighton and Hove Albion vs Everton",
        )
        self.assertEqual(title_from_match_slug("short"), "")


class HeuristicRowExtractorTests(unittest.TestCase):
    def setUp(self):
        self.events = HeuristicRowExtractor().extract(parse_html(ROWS_HTML), NOW)
        self.by_title = {event.event: event for event in self.events}

    def test_rows_become_events(self):
        self.assertEqual(
            [event.event for event in self.events],
            ["Arsenal vs Manchester City", "Real Madrid vs Barcelona", "Liverpool vs Everton", "Liverpool vs Chelsea"],
        )

    def test_channel_ids_come_from_hrefs(self):
        arsenal = self.by_title["Arsenal vs Manchester City"]
        self.assertEqual(arsenal.time, "14:00")
        self.assertEqual([c.channel_id for c in arsenal.channels], ["302", "491"])
        self.assertEqual([c.channel_name for c in arsenal.channels], ["Sky Sports", "beIN 1"])
        self.assertEqual(self.by_title["Real Madrid vs Barcelona"].channels[0].channel_id, "401")
        self.assertEqual(self.by_title["Liverpool vs Chelsea"].channels[0].channel_id, "700")

    def test_title_falls_back_when_link_text_is_the_title(self):
        self.assertEqual(self.by_title["Liverpool vs Everton"].channels[0].channel_id, "600")

    def test_boilerplate_and_linkless_rows_are_skipped(self):
        self.assertNotIn("24/7 Channels", self.by_title)
        self.assertNotIn("Ajax vs PSV", self.by_title)

    def test_oversized_container_is_ignored(self):
        filler = "Lorem ipsum dolor sit amet " * 20
        html = f'<div>{filler} 14:00 Big vs Box <a href="/stream/stream-5.php">x</a></div>'
        self.assertEqual(HeuristicRowExtractor().extract(parse_html(html), NOW), [])

    def test_short_container_around_rows_is_not_an_event(self):
        html = """
        <div class="schedule">
          <div class="row">14:00 Arsenal vs Manchester City <a href="/stream/stream-302.php">Sky</a></div>
          <div class="row">18:30 Inter vs Milan <a href="/stream/stream-610.php">Sky Italia</a></div>
        </div>
        """
        events = HeuristicRowExtractor().extract(parse_html(html), NOW)
        self.assertEqual(
            [(e.time, e.event) for e in events],
            [("14:00", "Arsenal vs Manchester City"), ("18:30", "Inter vs Milan")],
        )
        self.assertEqual([[c.channel_id for c in e.channels] for e in events], [["302"], ["610"]])

    def test_prefixed_slug_ids(self):
        extractor = HeuristicRowExtractor(id_prefix="sw-", id_patterns=(), slug_fallback=True)
        html = '<div>19:00 Porto vs Benfica <a href="/match/porto-benfica">Watch</a></div>'
        events = extractor.extract(parse_html(html), NOW)
        self.assertEqual(events[0].channels[0].channel_id, "sw-porto-benfica")


def next_data_page(payload):
    return f'<html><body><script id="__NEXT_DATA__" type="application/json">{json.dumps(payload)}</script></body></html>'


def simple_record_to_event(record, now=None):
    if not record.get("id"):
        return None
    return Event(time=record["time"], event=record["title"], channels=(make_channel("sh-" + record["id"]),))


class NextDataTests(unittest.TestCase):
    def test_direct_matches_shape(self):
        payload = {"props": {"pageProps": {"matches": [{"id": "a"}, "junk", {"id": "b"}]}}}
        self.assertEqual(walk_next_data(payload), [{"id": "a"}, {"id": "b"}])

    def test_dehydrated_query_shapes(self):
        payload = {
            "props": {
                "pageProps": {
                    "dehydratedState": {
                        "queries": [
                            {"state": {"data": {"matches": [{"id": "a"}]}}},
                            {"state": {"data": [{"id": "b"}]}},
                            {"state": {"data": "ignored"}},
                        ]
                    }
                }
            }
        }
        self.assertEqual(walk_next_data(payload), [{"id": "a"}, {"id": "b"}])

    def test_unknown_shape(self):
        self.assertEqual(walk_next_data({"props": {"pageProps": {"other": 1}}}), [])
        self.assertEqual(walk_next_data([]), [])

    def test_records_are_mapped(self):
        payload = {"props": {"pageProps": {"matches": [
            {"id": "x1", "time": "18:00", "title": "A vs B"},
            {"time": "19:00", "title": "No id"},
        ]}}}
        events = NextDataExtractor(simple_record_to_event).extract(parse_html(next_data_page(payload)), NOW)
        self.assertEqual([e.event for e in events], ["A vs B"])

    def test_missing_or_broken_payload_falls_through(self):
        extractor = NextDataExtractor(simple_record_to_event)
        self.assertIsNone(extractor.extract(parse_html("<html><body></body></html>"), NOW))
        broken = '<script id="__NEXT_DATA__">{not json</script>'
        self.assertIsNone(extractor.extract(parse_html(broken), NOW))
        empty = next_data_page({"props": {"pageProps": {"matches": []}}})
        self.assertIsNone(extractor.extract(parse_html(empty), NOW))


CARDS_HTML = """
<html><body>
  <a class="card-link" href="/match/arsenal-vs-chelsea">
    <div><span>Football</span><span>Arsenal vs Chelsea</span></div>
    <div><span>20:00</span></div>
  </a>
  <a class="card-link" href="/match/roma-vs-lazio/">
    <div><span>Football</span><span>Roma vs Lazio LIVE</span></div>
    <div><span>LIVE</span></div>
  </a>
  <a class="card-link" href="/match/lakers-vs-celtics">
    <div><span>Basketball</span><span>Lakers vs Celtics</span></div>
    <div><span>21:00</span></div>
  </a>
</body></html>
"""


class CardLinkExtractorTests(unittest.TestCase):
    def test_football_cards(self):
        events = CardLinkExtractor("sw-").extract(parse_html(CARDS_HTML), NOW)
        self.assertEqual([e.event for e in events], ["Arsenal vs Chelsea", "Roma vs Lazio"])
        self.assertEqual([e.channels[0].channel_id for e in events], ["sw-arsenal-vs-chelsea", "sw-roma-vs-lazio"])

    def test_live_card_uses_current_clock(self):
        events = CardLinkExtractor("sw-").extract(parse_html(CARDS_HTML), NOW)
        self.assertEqual([e.time for e in events], ["20:00", "15:00"])


class SlugRowExtractorTests(unittest.TestCase):
    def test_rows_titled_from_slug(self):
        html = """
        <html><body>
          <div class="match"><a href="/match/slg-Brighton-and-Hove-Albion-vs-Everton-3duPQw"><img src="b.png"> <span>19:30</span></a></div>
          <div class="match"><span>20:00</span> no image here <a href="/match/slg-A-vs-B-x">go</a></div>
        </body></html>
        """
        events = SlugRowExtractor("sh-").extract(parse_html(html), NOW)
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].event, "Brighton and Hove Albion vs Everton")
        self.assertEqual(events[0].time, "19:30")
        self.assertEqual(events[0].channels[0].channel_id, "sh-slg-Brighton-and-Hove-Albion-vs-Everton-3duPQw")


if __name__ == "__main__":
    unittest.main()
