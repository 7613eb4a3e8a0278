"""
Configuration module for Ingress-DNS.
"""

import os
import re
from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator


class Config(BaseModel):
    """Configuration for Ingress-DNS."""

    # Source configuration
    namespace: str = ""
    annotation_filter: str = ""
    label_filter: str = ""
    fqdn_template: str = ""
    combine_fqdn_annotation: bool = False
    ignore_hostname_annotation: bool = False
    ignore_ingress_tls_spec: bool = False
    ignore_ingress_rules_spec: bool = False
    ingress_class_names: List[str] = Field(default_factory=list)

    # Kubernetes configuration
    kubeconfig: str = ""
    kube_context: str = ""
    in_cluster: bool = False

    # Output configuration
    output_format: str = "yaml"

    # Logging configuration
    log_level: str = "info"

    @field_validator("ingress_class_names", mode="before")
    @classmethod
    def _split_class_names(cls, value):
        # Allow "public,dmz" as well as a YAML list
        if value is None:
            return []
        if isinstance(value, str):
            return [name.strip() for name in value.split(",") if name.strip()]
        return value

    @field_validator("output_format")
    @classmethod
    def _check_output_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("yaml", "json"):
            raise ValueError(f"output format must be 'yaml' or 'json', not {value!r}")
        return value

    @classmethod
    def from_yaml(cls, config_path: Optional[Union[str, Path]] = None) -> "Config":
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            Config: Config instance populated with values from the YAML file
        """
        # Default configuration paths to check
        default_paths = [
            Path("./ingress-dns.yaml"),
            Path("./ingress-dns.yml"),
            Path("/etc/ingress-dns/ingress-dns.yaml"),
            Path("/etc/ingress-dns/config.yaml"),
        ]

        # If config_path is provided, use it
        if config_path:
            paths = [Path(config_path)]
        else:
            paths = default_paths

        # Try to load configuration from the first existing path
        config_data = {}
        for path in paths:
            if path.exists():
                with open(path, "r") as f:
                    yaml_content = f.read()
                    # Substitute environment variables
                    yaml_content = cls._substitute_env_vars(yaml_content)
                    config_data = yaml.safe_load(yaml_content) or {}
                break

        # Flatten nested configuration
        flat_config = cls._flatten_config(config_data)

        # Create and return Config instance
        return cls(**flat_config)

    @staticmethod
    def _substitute_env_vars(content: str) -> str:
        """
        Substitute environment variables in the configuration content.

        Args:
            content: Configuration content

        Returns:
            str: Configuration content with environment variables substituted
        """
        # Pattern for ${ENV_VAR} or ${ENV_VAR:-default}
        pattern = r"\${([^}]+)}"

        def replace_env_var(match):
            env_var = match.group(1)
            if ":-" in env_var:
                env_var, default = env_var.split(":-", 1)
                return os.environ.get(env_var, default)
            return os.environ.get(env_var, "")

        return re.sub(pattern, replace_env_var, content)

    @staticmethod
    def _flatten_config(config_data: dict) -> dict:
        """
        Flatten nested configuration.

        Args:
            config_data: Nested configuration data

        Returns:
            dict: Flattened configuration data
        """
        flat_config = {}

        # Source configuration
        source = config_data.get("source") or {}
        flat_config["namespace"] = source.get("namespace") or ""
        flat_config["annotation_filter"] = source.get("annotation_filter") or ""
        flat_config["label_filter"] = source.get("label_filter") or ""
        flat_config["fqdn_template"] = source.get("fqdn_template") or ""
        flat_config["combine_fqdn_annotation"] = (
            source.get("combine_fqdn_annotation") or False
        )
        flat_config["ignore_hostname_annotation"] = (
            source.get("ignore_hostname_annotation") or False
        )
        flat_config["ignore_ingress_tls_spec"] = (
            source.get("ignore_ingress_tls_spec") or False
        )
        flat_config["ignore_ingress_rules_spec"] = (
            source.get("ignore_ingress_rules_spec") or False
        )
        flat_config["ingress_class_names"] = source.get("ingress_class_names") or []

        # Kubernetes configuration
        kubernetes = config_data.get("kubernetes") or {}
        flat_config["kubeconfig"] = kubernetes.get("kubeconfig") or ""
        flat_config["kube_context"] = kubernetes.get("context") or ""
        flat_config["in_cluster"] = kubernetes.get("in_cluster") or False

        # Output configuration
        output = config_data.get("output") or {}
        flat_config["output_format"] = output.get("format") or "yaml"

        # Logging configuration
        logging = config_data.get("logging") or {}
        flat_config["log_level"] = logging.get("level") or "info"

        return flat_config
