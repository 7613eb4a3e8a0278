"""Tests for config/config.py"""

import pytest
from pydantic import ValidationError

from ingress_dns.config.config import Config


class TestDefaults:
    """Tests for Config defaults."""

    def test_defaults(self):
        config = Config()
        assert config.namespace == ""
        assert config.ingress_class_names == []
        assert config.combine_fqdn_annotation is False
        assert config.output_format == "yaml"
        assert config.log_level == "info"

    def test_class_names_from_string(self):
        assert Config(ingress_class_names="public, dmz").ingress_class_names == [
            "public",
            "dmz",
        ]

    def test_invalid_output_format(self):
        with pytest.raises(ValidationError):
            Config(output_format="xml")


class TestFromYaml:
    """Tests for Config.from_yaml()."""

    def test_full_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            """
source:
  namespace: testing
  annotation_filter: kubernetes.io/ingress.class=nginx
  label_filter: app=web
  fqdn_template: "{{ name }}.example.org"
  combine_fqdn_annotation: true
  ignore_hostname_annotation: true
  ignore_ingress_tls_spec: true
  ignore_ingress_rules_spec: false
kubernetes:
  kubeconfig: /tmp/kubeconfig
  context: dev
output:
  format: json
logging:
  level: debug
"""
        )
        config = Config.from_yaml(config_file)
        assert config.namespace == "testing"
        assert config.annotation_filter == "kubernetes.io/ingress.class=nginx"
        assert config.label_filter == "app=web"
        assert config.fqdn_template == "{{ name }}.example.org"
        assert config.combine_fqdn_annotation is True
        assert config.ignore_hostname_annotation is True
        assert config.ignore_ingress_tls_spec is True
        assert config.ignore_ingress_rules_spec is False
        assert config.kubeconfig == "/tmp/kubeconfig"
        assert config.kube_context == "dev"
        assert config.output_format == "json"
        assert config.log_level == "debug"

    def test_env_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INGRESS_NAMESPACE", "prod")
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            """
source:
  namespace: ${INGRESS_NAMESPACE}
  ingress_class_names: ${CLASSES:-public,dmz}
"""
        )
        config = Config.from_yaml(config_file)
        assert config.namespace == "prod"
        assert config.ingress_class_names == ["public", "dmz"]

    def test_missing_file_gives_defaults(self, tmp_path):
        config = Config.from_yaml(tmp_path / "missing.yaml")
        assert config == Config()

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")
        assert Config.from_yaml(config_file) == Config()

    def test_null_values_give_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "source:\n"
            "  combine_fqdn_annotation:\n"
            "  ignore_hostname_annotation: null\n"
            "  ignore_ingress_tls_spec: ~\n"
            "  ignore_ingress_rules_spec:\n"
            "  ingress_class_names:\n"
            "kubernetes:\n"
            "  in_cluster:\n"
            "output:\n"
            "  format:\n"
            "logging:\n"
            "  level:\n"
        )
        assert Config.from_yaml(config_file) == Config()
