import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from banking_server import config


class TestConfig(unittest.TestCase):

    def test_bundled_config_sits_inside_the_package(self):
        package_dir = Path(config.__file__).resolve().parent
        self.assertEqual(config.DEFAULT_CONFIG_PATH.parent, package_dir)
        self.assertTrue(config.DEFAULT_CONFIG_PATH.is_file())

    def test_bundled_agent_settings(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = config.load_tool_settings("AgentService")

        self.assertEqual(settings["max_tool_rounds"], 10)
        self.assertIn("banking assistant", settings["instructions"])

    def test_config_path_override(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "custom.yaml"
            path.write_text("tools:\n  - name: FeatureFlags\n    settings:\n      timeout: 9\n", encoding="utf-8")
            with mock.patch.dict(os.environ, {"BANKING_AGENT_CONFIG": str(path)}):
                self.assertEqual(config.load_tool_settings("FeatureFlags"), {"timeout": 9})
                self.assertEqual(config.load_tool_settings("LLMTool"), {})

    def test_missing_config_file(self):
        self.assertEqual(config.load_config("/nonexistent/tools.yaml"), {})


if __name__ == '__main__':
    unittest.main()
