#!/usr/bin/env python3
"""Tests for fetch configuration."""

import json
import os
import tempfile
import unittest

from pydantic import ValidationError

from podcast_xml_parser import config


class TestFetchConfig(unittest.TestCase):
    """Tests for FetchConfig model."""

    def test_defaults(self):
        cfg = config.FetchConfig()
        self.assertEqual(cfg.request_headers, {})
        self.assertIsNone(cfg.request_size)
        self.assertIsNone(cfg.timeout)

    def test_camel_case_aliases(self):
        cfg = config.FetchConfig(requestHeaders={"User-Agent": "ua"}, requestSize=1000)
        self.assertEqual(cfg.request_headers, {"User-Agent": "ua"})
        self.assertEqual(cfg.request_size, 1000)

    def test_field_names_accepted(self):
        cfg = config.FetchConfig(request_headers={"X-Key": 5}, request_size=10, timeout=3)
        self.assertEqual(cfg.request_headers, {"X-Key": "5"})
        self.assertEqual(cfg.timeout, 3.0)

    def test_unknown_field_rejected(self):
        with self.assertRaises(ValidationError):
            config.FetchConfig(retries=3)

    def test_non_positive_request_size_rejected(self):
        for size in (0, -5):
            with self.subTest(size=size):
                with self.assertRaises(ValidationError):
                    config.FetchConfig(request_size=size)

    def test_non_positive_timeout_rejected(self):
        with self.assertRaises(ValidationError):
            config.FetchConfig(timeout=0)

    def test_empty_header_name_rejected(self):
        with self.assertRaises(ValidationError):
            config.FetchConfig(request_headers={" ": "x"})

    def test_headers_must_be_mapping(self):
        with self.assertRaises(ValidationError):
            config.FetchConfig(request_headers=["User-Agent: x"])

    def test_none_headers_become_empty(self):
        self.assertEqual(config.FetchConfig(request_headers=None).request_headers, {})

    def test_frozen(self):
        cfg = config.FetchConfig()
        with self.assertRaises(ValidationError):
            cfg.request_size = 10


class TestLoadConfigFile(unittest.TestCase):
    """Tests for load_config_file function."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)

    def _write(self, name, content):
        path = os.path.join(self.temp_dir.name, name)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(content)
        return path

    def test_json(self):
        path = self._write("fetch.json", json.dumps({"requestSize": 4096, "timeout": 5}))
        data = config.load_config_file(path)
        self.assertEqual(data, {"requestSize": 4096, "timeout": 5})
        self.assertEqual(config.FetchConfig(**data).request_size, 4096)

    def test_yaml(self):
        path = self._write(
            "fetch.yaml", "requestHeaders:\n  User-Agent: garden-bot\nrequest_size: 100\n"
        )
        cfg = config.FetchConfig(**config.load_config_file(path))
        self.assertEqual(cfg.request_headers, {"User-Agent": "garden-bot"})
        self.assertEqual(cfg.request_size, 100)

    def test_empty_yaml_is_empty_mapping(self):
        path = self._write("empty.yml", "")
        self.assertEqual(config.load_config_file(path), {})

    def test_empty_path(self):
        with self.assertRaises(ValueError) as ctx:
            config.load_config_file("")
        self.assertIn("cannot be empty", str(ctx.exception))

    def test_missing_file(self):
        with self.assertRaises(ValueError) as ctx:
            config.load_config_file(os.path.join(self.temp_dir.name, "nope.json"))
        self.assertIn("not found", str(ctx.exception))

    def test_unsupported_extension(self):
        path = self._write("fetch.toml", "requestSize = 1")
        with self.assertRaises(ValueError) as ctx:
            config.load_config_file(path)
        self.assertIn("Unsupported config file type", str(ctx.exception))

    def test_invalid_json(self):
        path = self._write("bad.json", "{not json")
        with self.assertRaises(ValueError) as ctx:
            config.load_config_file(path)
        self.assertIn("Invalid JSON", str(ctx.exception))

    def test_invalid_yaml(self):
        path = self._write("bad.yaml", "requestSize: [1, 2\n")
        with self.assertRaises(ValueError) as ctx:
            config.load_config_file(path)
        self.assertIn("Invalid YAML", str(ctx.exception))

    def test_top_level_must_be_mapping(self):
        path = self._write("list.json", "[1, 2]")
        with self.assertRaises(ValueError) as ctx:
            config.load_config_file(path)
        self.assertIn("mapping", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
