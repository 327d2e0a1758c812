import unittest

from blueprint.domain.ai.errors import ResponseParseError
from blueprint.domain.ai.extraction import collect_text, extract_json_candidate, parse_json_candidate
from blueprint.domain.ai.types import OtherFragment, TextFragment


class CollectTextTests(unittest.TestCase):
    def test_text_fragments_are_joined_in_order(self) -> None:
        fragments = (TextFragment('{"a":'), OtherFragment(kind="image_url"), TextFragment("1}"))

        self.assertEqual(collect_text(fragments), '{"a":\n1}')

    def test_no_text_fragments_yield_empty_string(self) -> None:
        self.assertEqual(collect_text((OtherFragment(kind="tool_call"),)), "")


class ExtractJsonCandidateTests(unittest.TestCase):
    def test_plain_json_is_kept(self) -> None:
        self.assertEqual(extract_json_candidate('{"a":1}'), '{"a":1}')

    def test_json_tagged_fence(self) -> None:
        self.assertEqual(extract_json_candidate('```json\n{"a":1}\n```'), '{"a":1}')

    def test_untagged_fence(self) -> None:
        self.assertEqual(extract_json_candidate('```\n{"a": [1, 2]}\n```'), '{"a": [1, 2]}')

    def test_first_fenced_block_wins(self) -> None:
        text = 'Option A:\n```json\n{"a":1}\n```\nOption B:\n```json\n{"a":2}\n```'

        self.assertEqual(extract_json_candidate(text), '{"a":1}')

    def test_fence_with_prose_around_it(self) -> None:
        text = 'Sure! Here you go:\n```json\n{"a": {"b": true}}\n```\nLet me know if you need more.'

        self.assertEqual(extract_json_candidate(text), '{"a": {"b": true}}')

    def test_prose_wrapped_reply_is_trimmed_to_braces(self) -> None:
        text = 'Here is the result: {"a":1} Hope that helps!'

        self.assertEqual(extract_json_candidate(text), '{"a":1}')

    def test_uppercase_tag_is_trimmed_by_brace_search(self) -> None:
        self.assertEqual(extract_json_candidate('```JSON\n{"a":1}\n```'), '{"a":1}')

    def test_nested_objects_keep_outer_braces(self) -> None:
        text = 'Result -> {"outer": {"inner": {"x": 1}}} <- done'

        self.assertEqual(extract_json_candidate(text), '{"outer": {"inner": {"x": 1}}}')

    def test_two_top_level_objects_span_both(self) -> None:
        text = 'first {"a":1} then {"b":2} end'

        self.assertEqual(extract_json_candidate(text), '{"a":1} then {"b":2}')

    def test_missing_open_brace_fails(self) -> None:
        with self.assertRaises(ResponseParseError) as ctx:
            extract_json_candidate("I cannot help with that.")

        self.assertEqual(ctx.exception.message, "json_object_start_missing")
        self.assertEqual(ctx.exception.raw_text, "I cannot help with that.")

    def test_missing_close_brace_fails(self) -> None:
        with self.assertRaises(ResponseParseError) as ctx:
            extract_json_candidate('{"a": 1')

        self.assertEqual(ctx.exception.message, "json_object_end_missing")


class ParseJsonCandidateTests(unittest.TestCase):
    def test_valid_candidate_parses(self) -> None:
        self.assertEqual(parse_json_candidate('{"a": [1, null]}', raw_text="raw"), {"a": [1, None]})

    def test_invalid_candidate_keeps_raw_text(self) -> None:
        with self.assertRaises(ResponseParseError) as ctx:
            parse_json_candidate("{a: 1}", raw_text="model said {a: 1}")

        self.assertTrue(ctx.exception.message.startswith("json_decode_failed:"))
        self.assertEqual(ctx.exception.raw_text, "model said {a: 1}")

    def test_non_standard_constants_are_rejected(self) -> None:
        with self.assertRaises(ResponseParseError):
            parse_json_candidate('{"a": NaN}', raw_text="")

    def test_overflowing_floats_are_rejected(self) -> None:
        with self.assertRaises(ResponseParseError) as ctx:
            parse_json_candidate('{"a": 1e400}', raw_text="raw")

        self.assertIn("number_out_of_range", ctx.exception.message)
        self.assertEqual(ctx.exception.raw_text, "raw")

    def test_huge_integers_are_kept_exact(self) -> None:
        self.assertEqual(parse_json_candidate('{"a": 1' + "0" * 400 + "}", raw_text=""), {"a": 10**400})


if __name__ == "__main__":
    unittest.main()
