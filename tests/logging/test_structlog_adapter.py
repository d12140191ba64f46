# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for StructlogAdapter: default LoggingPort implementation."""

import logging

from corsroute.core.config import Config
from corsroute.logging.port import LoggingPort
from corsroute.logging.structlog_adapter import LoggingProperties, StructlogAdapter
from corsroute.web import CorsRouter, create_app


class TestStructlogAdapterConformance:
    def test_implements_logging_port(self):
        assert isinstance(StructlogAdapter(), LoggingPort)


class TestLoggingProperties:
    def test_defaults(self):
        props = Config({}).bind(LoggingProperties)

        assert props.level == {"root": "INFO"}
        assert props.format == "console"


class TestStructlogAdapterConfigure:
    def test_configure_with_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))

        assert adapter._root_level == "INFO"
        assert adapter._format == "console"

    def test_configure_reads_root_level(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"corsroute": {"logging": {"level": {"root": "debug"}}}}))

        assert adapter._root_level == "DEBUG"
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_reads_format(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"corsroute": {"logging": {"format": "JSON"}}}))

        assert adapter._format == "json"

    def test_configure_reads_per_module_levels(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"corsroute": {"logging": {"level": {"root": "INFO", "corsroute.web.cors": "DEBUG"}}}}))

        assert adapter._module_levels == {"corsroute.web.cors": "DEBUG"}
        assert logging.getLogger("corsroute.web.cors").level == logging.DEBUG


class TestStructlogAdapterLoggers:
    def test_get_logger_returns_bound_logger(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))

        logger = adapter.get_logger("corsroute.test")

        assert callable(getattr(logger, "info", None))
        assert callable(getattr(logger, "debug", None))

    def test_set_level(self):
        adapter = StructlogAdapter()
        adapter.set_level("corsroute.test.level", "warning")

        assert logging.getLogger("corsroute.test.level").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        adapter = StructlogAdapter()
        adapter.set_level("corsroute.test.unknown", "chatty")

        assert logging.getLogger("corsroute.test.unknown").level == logging.INFO


class RecordingAdapter:
    def __init__(self):
        self.configured_with = None

    def configure(self, config):
        self.configured_with = config

    def get_logger(self, name):
        return logging.getLogger(name)

    def set_level(self, name, level):
        pass


class TestCreateAppLogging:
    def test_custom_adapter_is_configured(self):
        adapter = RecordingAdapter()
        config = Config({"corsroute": {"logging": {"format": "json"}}})

        create_app(CorsRouter(), config=config, logging_adapter=adapter)

        assert isinstance(adapter, LoggingPort)
        assert adapter.configured_with is config

    def test_adapter_untouched_without_config(self):
        adapter = RecordingAdapter()

        create_app(CorsRouter(), logging_adapter=adapter)

        assert adapter.configured_with is None
