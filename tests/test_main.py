"""Tests for __main__.py"""

import asyncio
import json
from unittest.mock import patch

import pytest
import yaml

from conftest import FakeNetworkingApi, make_v1_ingress
from ingress_dns import __main__ as entrypoint
from ingress_dns.models.models import Endpoint


class TestRenderEndpoints:
    """Tests for render_endpoints()."""

    def test_yaml(self):
        output = entrypoint.render_endpoints([Endpoint("foo.bar", ["1.2.3.4"], "A")], "yaml")
        assert yaml.safe_load(output) == [
            {"dnsName": "foo.bar", "recordType": "A", "targets": ["1.2.3.4"]}
        ]

    def test_json(self):
        output = entrypoint.render_endpoints([Endpoint("foo.bar", ["lb.com"], "CNAME")], "json")
        assert json.loads(output) == [
            {"dnsName": "foo.bar", "recordType": "CNAME", "targets": ["lb.com"]}
        ]


class TestMain:
    """Tests for main()."""

    def test_prints_endpoints(self, tmp_path, capsys):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("output:\n  format: json\n")
        api = FakeNetworkingApi(
            [make_v1_ingress("web", "default", dnsnames=["example.org"], ips=["8.8.8.8"])]
        )

        with patch.object(entrypoint, "build_networking_api", return_value=api):
            status = asyncio.run(entrypoint.main([str(config_file)]))

        assert status == 0
        data = json.loads(capsys.readouterr().out)
        assert data == [
            {
                "dnsName": "example.org",
                "recordType": "A",
                "targets": ["8.8.8.8"],
                "labels": {"resource": "ingress/default/web"},
            }
        ]

    def test_configuration_error_exits_nonzero(self, tmp_path, capsys):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "source:\n"
            "  annotation_filter: kubernetes.io/ingress.class=nginx\n"
            "  ingress_class_names: [public]\n"
        )

        with patch.object(entrypoint, "build_networking_api", return_value=FakeNetworkingApi()):
            status = asyncio.run(entrypoint.main([str(config_file)]))

        assert status == 1
        assert capsys.readouterr().out == ""

    def test_invalid_output_format_exits_nonzero(self, tmp_path, capsys):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("output:\n  format: xml\n")

        with patch.object(entrypoint, "build_networking_api") as build:
            status = asyncio.run(entrypoint.main([str(config_file)]))

        assert status == 1
        build.assert_not_called()
        assert capsys.readouterr().out == ""


class TestRun:
    """Tests for run()."""

    def test_interrupt_message_goes_to_stderr(self, capsys):
        def interrupted(coro):
            coro.close()
            raise KeyboardInterrupt

        with patch.object(entrypoint.asyncio, "run", side_effect=interrupted):
            with pytest.raises(SystemExit) as exc_info:
                entrypoint.run()

        assert exc_info.value.code == 0
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Shutting down" in captured.err
