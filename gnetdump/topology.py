"""
Topology retrieval: projects -> networks -> subnetworks, one project at a time.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from . import gcp_client
from .exceptions import InvalidCredentialsError, MalformedLocatorError, ProviderError
from .models import (
    ErrorRecord,
    FailureReason,
    Network,
    NetworkTopology,
    Project,
    ProjectNetworkModel,
    ProjectResult,
    Subnetwork,
    build_project_network_model,
)
from .utils import parse_subnetwork_uri

DEFAULT_NETWORK_NAME = "default"


def get_network_topology(compute: Any, project_id: str, skip_default: bool = False,
                         default_network_name: str = DEFAULT_NETWORK_NAME) -> NetworkTopology:
    """Collect every network of a project with its subnetworks, in listing order.

    Any failure (listing, a malformed subnetwork URI, a single subnetwork
    lookup) propagates and aborts the whole project.
    """
    networks = gcp_client.list_networks(compute, project_id)
    if networks is None:
        logging.info(f"No networks reported for project {project_id}")
        return NetworkTopology.absent(project_id)

    topology: Dict[Network, List[Subnetwork]] = {}
    for network in networks:
        if skip_default and network.name == default_network_name:
            logging.info(f"Skipping default network in project {project_id}")
            continue

        subnets: List[Subnetwork] = []
        topology[network] = subnets
        for subnetwork_uri in network.subnetworks:
            _owner_project, region, subnetwork_name = parse_subnetwork_uri(subnetwork_uri)
            subnets.append(gcp_client.get_subnetwork(compute, project_id, region, subnetwork_name))

        logging.info(f"Network '{network.name}' in project {project_id}: {len(subnets)} subnetworks")

    return NetworkTopology(project_id=project_id, networks=topology)


def resolve_projects(resource_manager: Any, project_id: Optional[str] = None) -> List[Project]:
    """Return the single requested project, or all visible projects when no id is given"""
    if project_id is not None:
        if not project_id.strip():
            raise ValueError("Project id must not be empty")
        logging.info(f"Generating network topology for Project: {project_id}")
        project = gcp_client.get_project(resource_manager, project_id)
        if project is None:
            logging.warning(f"Could not retrieve Project: {project_id}")
            return []
        return [project]

    logging.info("Generating network topology for all Projects")
    return gcp_client.list_projects(resource_manager)


def classify_failure(error: Exception) -> FailureReason:
    if isinstance(error, InvalidCredentialsError):
        return FailureReason.INVALID_CREDENTIALS
    if isinstance(error, MalformedLocatorError):
        return FailureReason.MALFORMED_LOCATOR
    if isinstance(error, ProviderError):
        return FailureReason.API_ERROR
    return FailureReason.UNEXPECTED


def fetch_project_topology(compute: Any, project: Project, skip_default: bool = False,
                           default_network_name: str = DEFAULT_NETWORK_NAME) -> ProjectResult:
    """Fetch and build one project's model, capturing any failure as an ErrorRecord"""
    logging.info(f"Retrieving network topology for Project: {project.project_id}")
    try:
        topology = get_network_topology(compute, project.project_id, skip_default, default_network_name)
    except Exception as e:
        reason = classify_failure(e)
        logging.error(f"Could not retrieve network topology for project {project.project_id}: {e}")
        return ProjectResult(
            project_id=project.project_id,
            error=ErrorRecord(project_id=project.project_id, message=str(e), reason=reason),
        )

    return ProjectResult(project_id=project.project_id, model=build_project_network_model(project, topology))


def get_project_network_topologies(resource_manager: Any, compute: Any, project_id: Optional[str] = None,
                                   skip_default: bool = False,
                                   default_network_name: str = DEFAULT_NETWORK_NAME
                                   ) -> Tuple[List[ProjectNetworkModel], List[ErrorRecord]]:
    """Build the network model of every selected project.

    Projects are processed sequentially in listing order. A project whose
    fetch fails lands in the error list and never stops the others. Failures
    while resolving the project set itself (e.g. rejected credentials)
    propagate to the caller.
    """
    results: List[ProjectNetworkModel] = []
    errors: List[ErrorRecord] = []

    projects = resolve_projects(resource_manager, project_id)
    for project in projects:
        outcome = fetch_project_topology(compute, project, skip_default, default_network_name)
        if outcome.ok:
            results.append(outcome.model)
        else:
            errors.append(outcome.error)

    logging.info(f"Processed {len(projects)} projects: {len(results)} succeeded, {len(errors)} failed")
    return results, errors


def aggregate_network_topologies(access_token: str, project_id: Optional[str] = None, skip_default: bool = False,
                                 config: Optional[Any] = None
                                 ) -> Tuple[List[ProjectNetworkModel], List[ErrorRecord]]:
    """Authenticate with an access token and collect the topology of the selected projects"""
    compute_version = config.compute_version if config is not None else "v1"
    resource_manager_version = config.resource_manager_version if config is not None else "v1"
    default_network_name = config.default_network_name if config is not None else DEFAULT_NETWORK_NAME

    gcp_client.initialize_credentials(access_token)
    resource_manager = gcp_client.build_resource_manager(resource_manager_version)
    compute = gcp_client.build_compute(compute_version)

    return get_project_network_topologies(resource_manager, compute, project_id, skip_default, default_network_name)
