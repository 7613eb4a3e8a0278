"""
Main entry point for Ingress-DNS.

Runs one extraction pass over the Ingress resources of a cluster and prints
the DNS endpoints they should have.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

import yaml
from kubernetes import client as k8s_client
from kubernetes import config as k8s_config
from kubernetes.config.config_exception import ConfigException
from pydantic import ValidationError

from ingress_dns.config.config import Config
from ingress_dns.errors import IngressDNSError
from ingress_dns.source.ingress import IngressSource


def build_networking_api(config: Config) -> k8s_client.NetworkingV1Api:
    """
    Build the Kubernetes networking API client.

    Args:
        config: Application configuration

    Returns:
        NetworkingV1Api: Client for listing ingresses
    """
    if config.in_cluster:
        k8s_config.load_incluster_config()
    else:
        k8s_config.load_kube_config(
            config_file=config.kubeconfig or None,
            context=config.kube_context or None,
        )
    return k8s_client.NetworkingV1Api()


def render_endpoints(endpoints, output_format: str) -> str:
    data = [endpoint.to_dict() for endpoint in endpoints]
    if output_format == "json":
        return json.dumps(data, indent=2)
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


async def main(argv=None) -> int:
    """Main entry point; returns the process exit status."""
    argv = sys.argv[1:] if argv is None else argv

    # Setup logging
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logger = logging.getLogger("ingress-dns")

    # Load configuration
    config_path = Path(argv[0]) if argv else None
    try:
        config = Config.from_yaml(config_path)
    except (ValidationError, yaml.YAMLError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    # Set log level from configuration
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(log_level)
    # Keep the Kubernetes client quiet unless root is DEBUG
    client_log_level = logging.DEBUG if log_level == logging.DEBUG else logging.WARNING
    logging.getLogger("kubernetes").setLevel(client_log_level)
    logging.getLogger("urllib3").setLevel(client_log_level)

    try:
        networking_api = build_networking_api(config)
    except ConfigException as e:
        logger.error(f"Could not load Kubernetes configuration: {e}")
        return 1

    try:
        source = IngressSource.from_config(config, networking_api)
        endpoints = await source.endpoints()
    except IngressDNSError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    logger.info(f"Found {len(endpoints)} endpoints")
    sys.stdout.write(render_endpoints(endpoints, config.output_format))
    sys.stdout.write("\n")
    return 0


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nShutting down Ingress-DNS", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    run()
