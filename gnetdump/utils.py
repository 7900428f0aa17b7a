"""
Utility functions for gnetdump
"""
import json
import logging
import os
from typing import Any, Tuple
from urllib.parse import urlparse

from .exceptions import MalformedLocatorError, OutputWriteError


def parse_subnetwork_uri(subnetwork_uri: str) -> Tuple[str, str, str]:
    """Parse a subnetwork self link and return (project_id, region, subnetwork_name)

    e.g. https://www.googleapis.com/compute/v1/projects/p1/regions/us-central1/subnetworks/sub-a
    """
    if not isinstance(subnetwork_uri, str):
        raise MalformedLocatorError(f"Invalid subnetwork URI: {subnetwork_uri!r}")

    try:
        parsed = urlparse(subnetwork_uri)
    except ValueError as e:
        raise MalformedLocatorError(f"Invalid subnetwork URI: {subnetwork_uri} ({e})") from e

    if not parsed.scheme or not parsed.netloc:
        raise MalformedLocatorError(f"Invalid subnetwork URI: {subnetwork_uri}")

    parts = parsed.path.split("/")
    if len(parts) < 9:
        raise MalformedLocatorError(
            f"Invalid subnetwork URI format, expected .../projects/{{project}}/regions/{{region}}/subnetworks/{{name}}: {subnetwork_uri}"
        )

    return parts[4], parts[6], parts[8]


def extract_resource_name(resource_url: str) -> str:
    """Return the last path segment of a resource URL (region, network, zone, ...)"""
    if not resource_url:
        return resource_url
    return resource_url.rstrip("/").split("/")[-1]


def verify_output_writable(filename: str) -> None:
    """Create and delete the output file so a bad path fails before any API calls"""
    try:
        with open(filename, "w"):
            pass
        os.remove(filename)
    except OSError as e:
        raise OutputWriteError(f"Failed to write to file {filename}. Error: {e}") from e


def save_to_json(data: Any, filename: str = "network_topology.json", indent: int = 2) -> None:
    try:
        with open(filename, "w") as f:
            json.dump(data, f, indent=indent)
    except OSError as e:
        raise OutputWriteError(f"Failed to write to file {filename}. Error: {e}") from e
    logging.info(f"Network topology saved to {filename}")
