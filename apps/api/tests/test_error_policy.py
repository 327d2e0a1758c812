import unittest

from fastapi import HTTPException

from blueprint.services.planning.error_policy import (
    build_http_error_payload,
    build_structured_error_detail,
    build_unexpected_error_payload,
)


class ErrorPolicyTests(unittest.TestCase):
    def test_structured_detail_round_trip(self) -> None:
        detail = build_structured_error_detail(
            error_code="backend_error",
            message="llm_http_status:503",
            retryable=True,
            detail="schema_generate_failed:backend_error:llm_http_status:503",
        )
        exc = HTTPException(status_code=502, detail=detail)
        payload = build_http_error_payload(exc, trace_id="trace-1")

        self.assertEqual(payload["error_code"], "backend_error")
        self.assertEqual(payload["message"], "llm_http_status:503")
        self.assertTrue(payload["retryable"])
        self.assertEqual(payload["trace_id"], "trace-1")
        self.assertIn("schema_generate_failed:backend_error", payload["detail"])

    def test_structured_detail_defaults_retryable_from_code(self) -> None:
        config = build_structured_error_detail(error_code="config_error", message="llm_api_key_missing")
        parse = build_structured_error_detail(error_code="parse_error", message="json_object_start_missing")

        self.assertFalse(config["retryable"])
        self.assertTrue(parse["retryable"])
        self.assertEqual(config["detail"], "llm_api_key_missing")

    def test_unknown_code_is_normalized(self) -> None:
        detail = build_structured_error_detail(error_code="Teapot", message="")

        self.assertEqual(detail["error_code"], "unknown")
        self.assertEqual(detail["message"], "Request failed")

    def test_message_whitespace_is_collapsed_and_truncated(self) -> None:
        detail = build_structured_error_detail(error_code="validation_error", message="a  \n b" + "x" * 400)

        self.assertTrue(detail["message"].startswith("a b"))
        self.assertEqual(len(detail["message"]), 260)

    def test_plain_string_detail(self) -> None:
        payload = build_http_error_payload(HTTPException(status_code=404, detail="Not Found"), trace_id="t")

        self.assertEqual(payload["error_code"], "invalid_request")
        self.assertEqual(payload["message"], "Not Found")
        self.assertFalse(payload["retryable"])

    def test_unexpected_payload(self) -> None:
        payload = build_unexpected_error_payload("trace-9")

        self.assertEqual(payload["error_code"], "unknown")
        self.assertEqual(payload["trace_id"], "trace-9")
        self.assertFalse(payload["retryable"])


if __name__ == "__main__":
    unittest.main()
