import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

from rich.console import Console

from neri import cli
from neri.config import Config, ProviderConfig
from neri.errors import ConnectionFailedError, TransportError
from neri.translator import Translation


class TestCli(unittest.TestCase):
    """Test cases for the command line entry point."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        with patch.dict(os.environ, {}, clear=True):
            self.config = Config(config_dir=self.tmp.name)

        self.output = io.StringIO()
        patchers = [
            patch('neri.cli.get_config', return_value=self.config),
            patch('neri.cli.setup_logging'),
            patch('neri.cli.console', Console(file=self.output, width=200, color_system=None)),
            patch('neri.logger.get_config', return_value=self.config),
        ]
        for patcher in patchers:
            patcher.start()
            self.addCleanup(patcher.stop)

    @patch('neri.cli.Translator')
    def test_ask(self, mock_translator):
        translator = mock_translator.return_value
        translator.provider_config.return_value = ProviderConfig("ollama", model="llama2")
        translator.translate.return_value = Translation(raw="$ ls -la", command="ls -la")

        exit_code = cli.run_cli(["ask", "list", "all", "files"])

        self.assertEqual(exit_code, 0)
        translator.translate.assert_called_once_with("list all files")
        self.assertIn("CMD: ls -la", self.output.getvalue())

    @patch('neri.cli.Translator')
    def test_ask_quiet_prints_only_command(self, mock_translator):
        translator = mock_translator.return_value
        translator.provider_config.return_value = ProviderConfig("ollama", model="llama2")
        translator.translate.return_value = Translation(raw="$ ls -la", command="ls -la")

        stdout = io.StringIO()
        with redirect_stdout(stdout):
            exit_code = cli.run_cli(["ask", "-q", "list files"])

        self.assertEqual(exit_code, 0)
        self.assertEqual(stdout.getvalue(), "ls -la\n")

    @patch('neri.cli.Translator')
    def test_ask_failure(self, mock_translator):
        translator = mock_translator.return_value
        translator.provider_config.return_value = ProviderConfig("ollama", model="llama2")
        translator.translate.side_effect = ConnectionFailedError(TransportError("connection refused"))

        exit_code = cli.run_cli(["ask", "list files"])

        self.assertEqual(exit_code, 1)
        self.assertIn("connection refused", self.output.getvalue())

    @patch('neri.cli.Translator')
    def test_history_lists_previous_translations(self, mock_translator):
        translator = mock_translator.return_value
        translator.provider_config.return_value = ProviderConfig("ollama", model="llama2")
        translator.translate.return_value = Translation(raw="df -h", command="df -h")

        cli.run_cli(["ask", "disk usage"])
        exit_code = cli.run_cli(["history"])

        self.assertEqual(exit_code, 0)
        self.assertIn("disk usage", self.output.getvalue())

    def test_config_init_and_show(self):
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(cli.run_cli(["config", "--init"]), 0)
            self.assertTrue(os.path.exists(self.config.config_file))

            self.assertEqual(cli.run_cli(["config"]), 0)

        output = self.output.getvalue()
        self.assertIn("Created default config file", output)
        self.assertIn("ollama", output)


if __name__ == "__main__":
    unittest.main()
