import base64
import unittest
from pathlib import Path
import sys

TESTS_DIR = Path(__file__).resolve().parent
PROJECT_DIR = TESTS_DIR.parent.parent
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

from footgoal.stream_ref import (
    SPORTWATCH,
    SPORTYHUNTER,
    DirectRef,
    EncodedUrlRef,
    SecondHopRef,
    UnresolvableRef,
    decode_base64_text,
    encode_slug_id,
    encode_url_id,
    is_absolute_url,
    parse_stream_ref,
)


EMBED_URL = "https://embed.example.com/player/live?id=42&lang=pt-BR&title=Gr%C3%AAmio+x+Inter#auto"


class EncodedUrlTests(unittest.TestCase):
    def test_url_with_query_survives_encoding(self):
        channel_id = encode_url_id(EMBED_URL)
        self.assertTrue(channel_id.startswith("sw-"))
        self.assertEqual(parse_stream_ref(channel_id), EncodedUrlRef(EMBED_URL))

    def test_standard_padded_base64_is_accepted(self):
        body = base64.b64encode(EMBED_URL.encode("utf-8")).decode("ascii")
        self.assertEqual(parse_stream_ref("sw-" + body), EncodedUrlRef(EMBED_URL))

    def test_decoded_text_that_is_not_a_url_falls_back_to_slug(self):
        body = base64.urlsafe_b64encode(b"just some words").rstrip(b"=").decode("ascii")
        self.assertEqual(parse_stream_ref("sw-" + body), SecondHopRef(SPORTWATCH, body))


class SlugAndDirectTests(unittest.TestCase):
    def test_sportwatch_slug(self):
        self.assertEqual(
            parse_stream_ref("sw-arsenal-vs-chelsea"),
            SecondHopRef(SPORTWATCH, "arsenal-vs-chelsea"),
        )

    def test_sportyhunter_slug(self):
        self.assertEqual(
            parse_stream_ref("sh-slg-Arsenal-vs-Chelsea-3duPQw"),
            SecondHopRef(SPORTYHUNTER, "slg-Arsenal-vs-Chelsea-3duPQw"),
        )

    def test_numeric_id_is_direct(self):
        self.assertEqual(parse_stream_ref("302"), DirectRef("302"))
        self.assertEqual(parse_stream_ref(" 491 "), DirectRef("491"))

    def test_encode_slug_id(self):
        self.assertEqual(encode_slug_id(SPORTYHUNTER, "abc"), "sh-abc")
        self.assertEqual(encode_slug_id(SPORTWATCH, "abc"), "sw-abc")
        with self.assertRaises(ValueError):
            encode_slug_id("elsewhere", "abc")


class MalformedIdentifierTests(unittest.TestCase):
    def test_missing_identifier(self):
        self.assertIsInstance(parse_stream_ref(""), UnresolvableRef)
        self.assertIsInstance(parse_stream_ref(None), UnresolvableRef)
        self.assertIsInstance(parse_stream_ref("sw-"), UnresolvableRef)

    def test_garbage_never_raises(self):
        for raw in ("sw-%%%###", "sh-bad slug!", "hello world", "sw-a b", "12ab"):
            with self.subTest(raw=raw):
                self.assertIsInstance(parse_stream_ref(raw), UnresolvableRef)

    def test_decode_rejects_bad_input(self):
        self.assertIsNone(decode_base64_text("!!!"))
        self.assertIsNone(decode_base64_text("a"))
        self.assertIsNone(decode_base64_text(""))

    def test_absolute_url_check(self):
        self.assertTrue(is_absolute_url("https://example.com/x"))
        self.assertFalse(is_absolute_url("/relative/path"))
        self.assertFalse(is_absolute_url("javascript:alert(1)"))
        self.assertFalse(is_absolute_url("https://exa mple.com"))


if __name__ == "__main__":
    unittest.main()
