"""
Value records for projects, networks and subnetworks, and the output tree
written to the topology JSON file.

Provider records (Project, Network, Subnetwork) are the typed shape of the raw
Google API responses. The output tree (ProjectNetworkModel, NetworkModel,
SubnetworkModel) carries only the fields relevant to topology; everything else
the API returns (quotas, timestamps, self links, fingerprints) is dropped by
build_project_network_model().
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

# attribute name -> JSON name
PROJECT_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("parent", "parent"),
    ("project_id", "projectId"),
    ("project_number", "projectNumber"),
    ("name", "name"),
    ("networks", "networks"),
)

NETWORK_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("name", "name"),
    ("peerings", "peerings"),
    ("subnets", "subnets"),
)

SUBNETWORK_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("gateway_address", "gatewayAddress"),
    ("ip_cidr_range", "ipCidrRange"),
    ("name", "name"),
    ("region", "region"),
    ("secondary_ip_ranges", "secondaryIpRanges"),
)


def _to_json_value(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_to_json_value(item) for item in value]
    if isinstance(value, dict):
        return {key: _to_json_value(item) for key, item in value.items()}
    return value


def _fields_to_dict(obj: Any, fields: Tuple[Tuple[str, str], ...]) -> Dict[str, Any]:
    return {json_name: _to_json_value(getattr(obj, attr)) for attr, json_name in fields}


@dataclass(frozen=True)
class ResourceParent:
    """Organization or folder that owns a project"""
    type: str
    id: str

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "id": self.id}


@dataclass(frozen=True)
class Project:
    project_id: str
    name: str
    project_number: Optional[int] = None
    parent: Optional[ResourceParent] = None


@dataclass(frozen=True)
class Network:
    """A VPC network as listed by the compute API.

    Peerings are passed through untouched, so they take no part in equality
    or hashing; a network is identified by its name and self link.
    """
    name: str
    peerings: Tuple[Dict[str, Any], ...] = field(default=(), compare=False)
    subnetworks: Tuple[str, ...] = field(default=(), compare=False)
    self_link: Optional[str] = None


@dataclass(frozen=True)
class Subnetwork:
    name: str
    region: str
    ip_cidr_range: str
    gateway_address: Optional[str] = None
    secondary_ip_ranges: Tuple[Dict[str, Any], ...] = field(default=(), compare=False)


@dataclass(frozen=True)
class NetworkTopology:
    """Networks of one project, each mapped to its subnetworks in fetch order.

    An absent topology (the network listing had no items at all) is distinct
    from a present topology with no networks, e.g. when only the skipped
    default network existed.
    """
    project_id: str
    networks: Dict[Network, List[Subnetwork]] = field(default_factory=dict, compare=False)
    present: bool = True

    @classmethod
    def absent(cls, project_id: str) -> "NetworkTopology":
        return cls(project_id=project_id, networks={}, present=False)

    def __len__(self) -> int:
        return len(self.networks)


@dataclass(frozen=True)
class SubnetworkModel:
    gateway_address: Optional[str]
    ip_cidr_range: str
    name: str
    region: str
    secondary_ip_ranges: Tuple[Dict[str, Any], ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return _fields_to_dict(self, SUBNETWORK_FIELDS)


@dataclass(frozen=True)
class NetworkModel:
    name: str
    peerings: Tuple[Dict[str, Any], ...] = ()
    subnets: Tuple[SubnetworkModel, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return _fields_to_dict(self, NETWORK_FIELDS)


@dataclass(frozen=True)
class ProjectNetworkModel:
    project_id: str
    name: str
    project_number: Optional[int] = None
    parent: Optional[ResourceParent] = None
    networks: Tuple[NetworkModel, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return _fields_to_dict(self, PROJECT_FIELDS)


class FailureReason(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    MALFORMED_LOCATOR = "malformed_locator"
    API_ERROR = "api_error"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class ErrorRecord:
    """A project whose topology could not be fetched"""
    project_id: str
    message: str
    reason: FailureReason = FailureReason.UNEXPECTED

    def to_pair(self) -> List[str]:
        return [self.project_id, self.message]


@dataclass(frozen=True)
class ProjectResult:
    """Outcome of fetching one project: exactly one of model or error is set"""
    project_id: str
    model: Optional[ProjectNetworkModel] = None
    error: Optional[ErrorRecord] = None

    def __post_init__(self) -> None:
        if (self.model is None) == (self.error is None):
            raise ValueError("ProjectResult requires exactly one of model or error")

    @property
    def ok(self) -> bool:
        return self.error is None


def build_subnetwork_model(subnet: Subnetwork) -> SubnetworkModel:
    return SubnetworkModel(
        gateway_address=subnet.gateway_address,
        ip_cidr_range=subnet.ip_cidr_range,
        name=subnet.name,
        region=subnet.region,
        secondary_ip_ranges=tuple(subnet.secondary_ip_ranges),
    )


def build_network_model(network: Network, subnets: List[Subnetwork]) -> NetworkModel:
    return NetworkModel(
        name=network.name,
        peerings=tuple(network.peerings),
        subnets=tuple(build_subnetwork_model(subnet) for subnet in subnets),
    )


def build_project_network_model(project: Project, topology: Optional[NetworkTopology]) -> ProjectNetworkModel:
    """Fold a project and its fetched topology into the output tree.

    Networks keep the order the fetcher inserted them in, subnets keep fetch
    order. An absent (or missing) topology yields a project with no networks.
    """
    networks: Tuple[NetworkModel, ...] = ()
    if topology is not None and topology.present:
        networks = tuple(
            build_network_model(network, subnets)
            for network, subnets in topology.networks.items()
        )

    return ProjectNetworkModel(
        project_id=project.project_id,
        name=project.name,
        project_number=project.project_number,
        parent=project.parent,
        networks=networks,
    )


def models_to_json_data(models: List[ProjectNetworkModel]) -> List[Dict[str, Any]]:
    """Convert result models to plain JSON-ready data"""
    return [model.to_dict() for model in models]


def errors_to_json_data(errors: List[ErrorRecord]) -> List[List[str]]:
    """Convert error records to [projectId, message] pairs"""
    return [error.to_pair() for error in errors]
