import json
import unittest

import httpx

from chat_gateway.errors import (
    ErrorKind,
    InvalidResponseError,
    NormalizedError,
    ProviderError,
    RequestCancelled,
)
from chat_gateway.normalizer import normalize


class NormalizeTests(unittest.TestCase):
    def test_status_codes(self) -> None:
        cases = [
            (401, ErrorKind.AUTH_FAILED, False),
            (403, ErrorKind.AUTH_FAILED, False),
            (429, ErrorKind.RATE_LIMITED, True),
            (404, ErrorKind.MODEL_NOT_FOUND, False),
            (500, ErrorKind.UNAVAILABLE, True),
            (502, ErrorKind.UNAVAILABLE, True),
            (400, ErrorKind.UNKNOWN, False),
        ]
        for status, kind, retryable in cases:
            with self.subTest(status=status):
                err = normalize(ProviderError("hosted-commercial", "boom", status_code=status))
                self.assertEqual(err.kind, kind)
                self.assertEqual(err.retryable, retryable)
                self.assertEqual(err.provider, "hosted-commercial")

    def test_message_signatures(self) -> None:
        cases = [
            ("Incorrect API key provided", ErrorKind.AUTH_FAILED),
            ("You hit the rate limit for this org", ErrorKind.RATE_LIMITED),
            ("The model not found on this server", ErrorKind.MODEL_NOT_FOUND),
        ]
        for message, kind in cases:
            with self.subTest(message=message):
                self.assertEqual(normalize(ProviderError("self-hosted", message)).kind, kind)

    def test_transport_failures_are_unavailable(self) -> None:
        request = httpx.Request("POST", "http://local:8080/v1/chat/completions")
        for exc in (
            httpx.ConnectError("refused", request=request),
            httpx.ReadTimeout("timed out", request=request),
            httpx.ConnectTimeout("timed out", request=request),
        ):
            with self.subTest(exc=type(exc).__name__):
                err = normalize(exc, provider="self-hosted")
                self.assertEqual(err.kind, ErrorKind.UNAVAILABLE)
                self.assertTrue(err.retryable)

    def test_transport_rule_precedes_signatures(self) -> None:
        request = httpx.Request("GET", "http://local:8080/v1/models")
        err = normalize(httpx.ConnectError("unauthorized proxy", request=request))

        self.assertEqual(err.kind, ErrorKind.UNAVAILABLE)

    def test_status_auth_beats_server_error_signature(self) -> None:
        err = normalize(ProviderError("hosted-open", "rate limit", status_code=401))

        self.assertEqual(err.kind, ErrorKind.AUTH_FAILED)

    def test_malformed_bodies(self) -> None:
        for exc in (
            InvalidResponseError("hosted-open", "Invalid response format"),
            json.JSONDecodeError("Expecting value", "<html>", 0),
            KeyError("choices"),
        ):
            with self.subTest(exc=type(exc).__name__):
                err = normalize(exc)
                self.assertEqual(err.kind, ErrorKind.INVALID_RESPONSE)
                self.assertFalse(err.retryable)

    def test_malformed_body_snippet_ignores_signatures(self) -> None:
        exc = InvalidResponseError(
            "self-hosted", "Response body is not JSON: '<html>401 Unauthorized</html>'"
        )

        err = normalize(exc)

        self.assertEqual(err.kind, ErrorKind.INVALID_RESPONSE)
        self.assertFalse(err.retryable)

    def test_unknown_is_logged(self) -> None:
        with self.assertLogs("chat_gateway.normalizer", level="ERROR"):
            err = normalize(RuntimeError("something odd"))

        self.assertEqual(err.kind, ErrorKind.UNKNOWN)
        self.assertFalse(err.retryable)

    def test_pure_and_idempotent(self) -> None:
        raw = ProviderError("hosted-commercial", "slow down", status_code=429)

        first, second = normalize(raw), normalize(raw)

        self.assertEqual((first.kind, first.message, first.retryable), (second.kind, second.message, second.retryable))
        self.assertIs(normalize(first), first)

    def test_cancellation_passes_through(self) -> None:
        cancelled = RequestCancelled()

        self.assertIs(normalize(cancelled), cancelled)
        self.assertIsInstance(cancelled, NormalizedError)
        self.assertFalse(cancelled.retryable)


if __name__ == "__main__":
    unittest.main()
