"""
Pytest configuration and shared fixtures for gnetdump tests
"""
import json
import pytest
from unittest.mock import Mock, MagicMock
from googleapiclient.errors import HttpError

from gnetdump import gcp_client
from tests.fixtures.gcp_api_responses.network_responses import (
    APP_NETWORK_LIST_RESPONSE,
    HUB_NETWORK_LIST_RESPONSE,
    NO_ITEMS_NETWORK_LIST_RESPONSE,
    SUBNETWORK_RESPONSES,
)
from tests.fixtures.gcp_api_responses.project_responses import PROJECT_LIST_RESPONSE


def make_http_error(status, message="error", details=None, errors=None):
    """Build a googleapiclient HttpError carrying a Google-style JSON error body"""
    resp = Mock(status=status, reason=message)
    body = {"code": status, "message": message}
    if details is not None:
        body["details"] = details
    if errors is not None:
        body["errors"] = errors
    content = json.dumps({"error": body}).encode("utf-8")
    return HttpError(resp, content)


def _request(response):
    request = Mock()
    if isinstance(response, Exception):
        request.execute.side_effect = response
    else:
        request.execute.return_value = response
    return request


def build_compute_service(networks_by_project, subnetworks):
    """Fake compute v1 service: networks().list() and subnetworks().get() backed by dicts

    Values may be exceptions, which are raised from execute().
    """
    compute = MagicMock()

    def list_networks(project):
        return _request(networks_by_project[project])

    def get_subnetwork(project, region, subnetwork):
        key = (project, region, subnetwork)
        if key not in subnetworks:
            return _request(make_http_error(404, f"The resource 'projects/{project}/regions/{region}/subnetworks/{subnetwork}' was not found"))
        return _request(subnetworks[key])

    compute.networks.return_value.list.side_effect = list_networks
    compute.subnetworks.return_value.get.side_effect = get_subnetwork
    return compute


def build_resource_manager_service(list_response=None, projects_by_id=None):
    """Fake cloudresourcemanager v1 service: projects().list() and projects().get()"""
    resource_manager = MagicMock()
    projects_by_id = projects_by_id or {}

    def get_project(projectId):
        if projectId not in projects_by_id:
            return _request(make_http_error(403, "The caller does not have permission"))
        return _request(projects_by_id[projectId])

    resource_manager.projects.return_value.list.return_value = _request(list_response or {})
    resource_manager.projects.return_value.get.side_effect = get_project
    return resource_manager


@pytest.fixture(autouse=True)
def reset_credentials():
    """Make sure no test leaks global credentials into another"""
    gcp_client._credentials = None
    yield
    gcp_client._credentials = None


@pytest.fixture
def sample_subnetworks():
    """Subnetwork responses keyed by (project, region, name)"""
    return dict(SUBNETWORK_RESPONSES)


@pytest.fixture
def sample_compute(sample_subnetworks):
    """Compute service for the three sample projects"""
    return build_compute_service(
        {
            "network-hub-prod": HUB_NETWORK_LIST_RESPONSE,
            "app-team-dev": APP_NETWORK_LIST_RESPONSE,
            "sandbox-42": NO_ITEMS_NETWORK_LIST_RESPONSE,
        },
        sample_subnetworks,
    )


@pytest.fixture
def sample_resource_manager():
    """Resource manager listing the three sample projects"""
    return build_resource_manager_service(
        list_response=PROJECT_LIST_RESPONSE,
        projects_by_id={p["projectId"]: p for p in PROJECT_LIST_RESPONSE["projects"]},
    )


@pytest.fixture
def p1_compute():
    """The single-project p1 scenario: a default network with one subnetwork"""
    uri = "https://www.googleapis.com/compute/v1/projects/p1/regions/us-central1/subnetworks/sub-a"
    return build_compute_service(
        {"p1": {"items": [{"name": "default", "subnetworks": [uri]}]}},
        {
            ("p1", "us-central1", "sub-a"): {
                "name": "sub-a",
                "region": "https://www.googleapis.com/compute/v1/projects/p1/regions/us-central1",
                "ipCidrRange": "10.128.0.0/20",
                "gatewayAddress": "10.128.0.1",
            }
        },
    )


@pytest.fixture
def p1_resource_manager():
    project = {"projectId": "p1", "projectNumber": "1", "name": "p1"}
    return build_resource_manager_service(list_response={"projects": [project]}, projects_by_id={"p1": project})
