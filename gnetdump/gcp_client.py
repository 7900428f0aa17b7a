"""
Google Cloud API access: credentials, service clients and the project,
network and subnetwork lookups used by the topology fetcher.
"""
import json
import logging
from typing import Any, Dict, List, NoReturn, Optional, Set

from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .exceptions import InvalidCredentialsError, ProviderError
from .models import Network, Project, ResourceParent, Subnetwork
from .utils import extract_resource_name

INVALID_CREDENTIALS_MESSAGE = (
    "Please check your access token - credentials are invalid. "
    "Keep in mind that access tokens will expire."
)

SERVICE_DISABLED_REASONS = frozenset({"SERVICE_DISABLED", "accessNotConfigured"})

# Global credentials
_credentials: Optional[Credentials] = None


def initialize_credentials(access_token: str) -> None:
    """Wrap an access token (e.g. from "gcloud auth print-access-token") as global credentials"""
    global _credentials
    if not access_token or not access_token.strip():
        raise InvalidCredentialsError("Access token is empty")
    _credentials = Credentials(token=access_token.strip())


def get_credentials() -> Credentials:
    """Get the global credentials instance"""
    global _credentials
    if _credentials is None:
        raise RuntimeError("Credentials not initialized. Call initialize_credentials() first.")
    return _credentials


def build_compute(version: str = "v1") -> Any:
    return build("compute", version, credentials=get_credentials(), cache_discovery=False)


def build_resource_manager(version: str = "v1") -> Any:
    return build("cloudresourcemanager", version, credentials=get_credentials(), cache_discovery=False)


def _http_status(error: HttpError) -> Optional[int]:
    status = getattr(error, "status_code", None)
    if status is None and getattr(error, "resp", None) is not None:
        status = getattr(error.resp, "status", None)
    try:
        return int(status) if status is not None else None
    except (TypeError, ValueError):
        return None


def _http_reason(error: HttpError) -> str:
    reason = getattr(error, "reason", None)
    if reason:
        return str(reason)
    return str(error)


def _error_detail_reasons(error: HttpError) -> Set[str]:
    """Collect the machine-readable reasons from a Google JSON error body"""
    try:
        body = json.loads(error.content.decode("utf-8"))
    except (AttributeError, TypeError, ValueError):
        return set()

    details = body.get("error") if isinstance(body, dict) else None
    if not isinstance(details, dict):
        return set()

    reasons = set()
    for key in ("details", "errors"):
        for item in details.get(key) or []:
            if isinstance(item, dict) and item.get("reason"):
                reasons.add(item["reason"])
    return reasons


def _is_project_not_visible(error: HttpError) -> bool:
    # Nonexistent projects answer 403 as well, but a disabled API is a real failure
    status = _http_status(error)
    if status == 404:
        return True
    return status == 403 and not (_error_detail_reasons(error) & SERVICE_DISABLED_REASONS)


def raise_provider_error(error: Exception, context: str) -> NoReturn:
    """Re-raise a google client error as InvalidCredentialsError or ProviderError"""
    if isinstance(error, RefreshError):
        raise InvalidCredentialsError(f"{context}: {error}") from error
    if isinstance(error, HttpError):
        status = _http_status(error)
        if status == 401:
            raise InvalidCredentialsError(f"{context}: {_http_reason(error)}") from error
        raise ProviderError(f"{context}: {_http_reason(error)}", status_code=status) from error
    raise error


def project_from_api(data: Dict[str, Any]) -> Project:
    parent = None
    if data.get("parent"):
        parent = ResourceParent(type=data["parent"].get("type"), id=data["parent"].get("id"))

    project_number = data.get("projectNumber")
    if project_number is not None:
        project_number = int(project_number)

    return Project(
        project_id=data["projectId"],
        name=data.get("name", data["projectId"]),
        project_number=project_number,
        parent=parent,
    )


def network_from_api(data: Dict[str, Any]) -> Network:
    # Legacy (non-VPC) networks carry no subnetworks key
    return Network(
        name=data["name"],
        peerings=tuple(data.get("peerings") or ()),
        subnetworks=tuple(data.get("subnetworks") or ()),
        self_link=data.get("selfLink"),
    )


def subnetwork_from_api(data: Dict[str, Any]) -> Subnetwork:
    return Subnetwork(
        name=data["name"],
        region=extract_resource_name(data.get("region", "")),
        ip_cidr_range=data.get("ipCidrRange"),
        gateway_address=data.get("gatewayAddress"),
        secondary_ip_ranges=tuple(data.get("secondaryIpRanges") or ()),
    )


def get_project(resource_manager: Any, project_id: str) -> Optional[Project]:
    """Look up a single project, returning None when it does not exist or is not visible"""
    try:
        response = resource_manager.projects().get(projectId=project_id).execute()
    except HttpError as e:
        if _is_project_not_visible(e):
            logging.warning(f"Project {project_id} not found or not accessible: {_http_reason(e)}")
            return None
        raise_provider_error(e, f"Could not retrieve project {project_id}")
    except RefreshError as e:
        raise_provider_error(e, f"Could not retrieve project {project_id}")

    if not response:
        return None
    return project_from_api(response)


def list_projects(resource_manager: Any) -> List[Project]:
    """List all projects visible to the credentials (single listing call)"""
    try:
        response = resource_manager.projects().list().execute()
    except (HttpError, RefreshError) as e:
        raise_provider_error(e, "Could not list projects")

    projects = [project_from_api(item) for item in (response or {}).get("projects", [])]
    logging.info(f"Found {len(projects)} projects")
    return projects


def list_networks(compute: Any, project_id: str) -> Optional[List[Network]]:
    """List the VPC networks of a project; None when the API reports no items at all"""
    try:
        response = compute.networks().list(project=project_id).execute()
    except (HttpError, RefreshError) as e:
        raise_provider_error(e, f"Could not list networks for project {project_id}")

    items = (response or {}).get("items")
    if items is None:
        return None
    return [network_from_api(item) for item in items]


def get_subnetwork(compute: Any, project_id: str, region: str, name: str) -> Subnetwork:
    try:
        response = compute.subnetworks().get(project=project_id, region=region, subnetwork=name).execute()
    except (HttpError, RefreshError) as e:
        raise_provider_error(e, f"Could not retrieve subnetwork {name} in {region} for project {project_id}")

    return subnetwork_from_api(response)
