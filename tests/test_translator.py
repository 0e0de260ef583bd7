import json
import unittest
from unittest.mock import MagicMock, patch

import requests

from neri.errors import (
    ConnectionFailedError,
    HTTPStatusError,
    MalformedResponseError,
    NoCommandExtractedError,
    TransportError,
    UnsupportedProviderError,
)
from neri.translator import Translation, Translator


def _ollama_body(text):
    return json.dumps({"response": text})


class TestTranslator(unittest.TestCase):
    """Test cases for the translation orchestrator."""

    def setUp(self):
        self.settings = {"AI_PROVIDER": "ollama"}
        self.sender = MagicMock(return_value=(200, _ollama_body("ls -la")))
        self.translator = Translator(lookup=self.settings.get, sender=self.sender)

    def test_translate_success(self):
        result = self.translator.translate("list files")

        self.assertEqual(result, Translation(raw="ls -la", command="ls -la"))
        request = self.sender.call_args[0][0]
        self.assertEqual(request.endpoint, "http://localhost:11434/api/generate")
        self.assertIn("list files", request.payload["prompt"])

    def test_raw_text_is_kept(self):
        raw = "You can list files with:\n```bash\nls -la\n```"
        self.sender.return_value = (200, _ollama_body(raw))

        result = self.translator.translate("list files")

        self.assertEqual(result.raw, raw)
        self.assertEqual(result.command, "ls -la")

    def test_empty_answer_raises_no_command(self):
        for raw in ("", "  \n  "):
            self.sender.return_value = (200, _ollama_body(raw))
            with self.subTest(raw=raw):
                with self.assertRaises(NoCommandExtractedError) as ctx:
                    self.translator.translate("list files")
                self.assertEqual(ctx.exception.raw, raw)

    def test_unsupported_provider_is_connection_failure(self):
        translator = Translator(lookup={"AI_PROVIDER": "claude"}.get, sender=self.sender)

        with self.assertRaises(ConnectionFailedError) as ctx:
            translator.translate("list files")

        self.assertIsInstance(ctx.exception.cause, UnsupportedProviderError)
        self.assertIn("claude", str(ctx.exception))
        self.assertEqual(ctx.exception.raw, "")
        self.sender.assert_not_called()

    def test_http_status_is_connection_failure(self):
        self.sender.return_value = (401, '{"error": "invalid api key"}')

        with self.assertRaises(ConnectionFailedError) as ctx:
            self.translator.translate("list files")

        self.assertIsInstance(ctx.exception.__cause__, HTTPStatusError)
        self.assertIn("401", str(ctx.exception))

    def test_malformed_body_is_connection_failure(self):
        self.sender.return_value = (200, "not json")

        with self.assertRaises(ConnectionFailedError) as ctx:
            self.translator.translate("list files")

        self.assertIsInstance(ctx.exception.cause, MalformedResponseError)

    def test_transport_error_is_connection_failure(self):
        self.sender.side_effect = TransportError("connection refused")

        with self.assertRaises(ConnectionFailedError) as ctx:
            self.translator.translate("list files")

        self.assertIsInstance(ctx.exception.cause, TransportError)
        self.assertIn("connection refused", str(ctx.exception))

    @patch('neri.transport.requests.post')
    def test_default_sender_uses_http(self, mock_post):
        response_mock = MagicMock()
        response_mock.status_code = 200
        response_mock.text = json.dumps({"choices": [{"message": {"content": "`df -h`"}}]})
        mock_post.return_value = response_mock

        settings = {"AI_PROVIDER": "openai", "AI_API_KEY": "sk-test"}
        result = Translator(lookup=settings.get).translate("disk usage")

        self.assertEqual(result.command, "df -h")
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "https://api.openai.com/v1/chat/completions")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer sk-test")

    @patch('neri.transport.requests.post')
    def test_network_failure_through_default_sender(self, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectionError("refused")

        with self.assertRaises(ConnectionFailedError) as ctx:
            Translator(lookup={}.get).translate("list files")

        self.assertIsInstance(ctx.exception.cause, TransportError)

    @patch('neri.transport.requests.post')
    def test_unencodable_api_key_is_connection_failure(self, mock_post):
        mock_post.side_effect = UnicodeEncodeError("latin-1", "Bearer \u201csk-abc\u201d", 7, 8, "ordinal not in range(256)")
        settings = {"AI_PROVIDER": "openai", "AI_API_KEY": "\u201csk-abc\u201d"}

        with self.assertRaises(ConnectionFailedError) as ctx:
            Translator(lookup=settings.get).translate("list files")

        self.assertIsInstance(ctx.exception.cause, TransportError)


if __name__ == "__main__":
    unittest.main()
