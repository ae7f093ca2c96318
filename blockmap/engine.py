from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from blockmap.config import Settings
from blockmap.errors import BlockmapError
from blockmap.models.diagnostic import Diagnostic, Severity
from blockmap.models.resource import Resource
from blockmap.services import KIND_DATA, KIND_RESOURCE, REGISTRY, lookup
from blockmap.state import ResourceData


@dataclass
class Outcome:
    resource: Resource
    id: str = ""
    state: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not any(d.severity == Severity.ERROR for d in self.diagnostics)

    def to_dict(self) -> dict:
        return {
            "address": self.resource.address,
            "source_file": self.resource.source_file,
            "id": self.id,
            "state": self.state,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


def _error(resource: Resource, exc: BlockmapError) -> Diagnostic:
    return Diagnostic(
        severity=Severity.ERROR,
        summary=str(exc),
        address=resource.address,
        detail=type(exc).__name__,
    )


def read_block(resource: Resource, clients: Any, settings: Settings) -> Outcome:
    """Decode one data block and run its Read function."""
    outcome = Outcome(resource=resource)
    definition = lookup(KIND_DATA, resource.resource_type)
    if definition is None:
        outcome.diagnostics.append(Diagnostic(
            severity=Severity.WARNING,
            summary=f"unsupported data source type '{resource.resource_type}', skipped",
            address=resource.address,
        ))
        return outcome

    try:
        data = ResourceData(definition.schema, config=resource.properties)
        client = clients.get(definition.client) if definition.client else None
        definition.read(data, client, settings)
    except BlockmapError as exc:
        outcome.diagnostics.append(_error(resource, exc))
        return outcome

    outcome.id = data.id
    outcome.state = data.to_state()
    return outcome


def import_resource(type_name: str, resource_id: str, clients: Any, settings: Settings) -> Outcome:
    """Import an existing remote object by ID and read its state."""
    resource = Resource(kind=KIND_RESOURCE, resource_type=type_name, name=resource_id)
    outcome = Outcome(resource=resource)
    definition = lookup(KIND_RESOURCE, type_name)
    if definition is None or definition.importer is None:
        outcome.diagnostics.append(Diagnostic(
            severity=Severity.ERROR,
            summary=f"resource type '{type_name}' does not support import",
            address=resource.address,
        ))
        return outcome

    data = ResourceData(definition.schema, id=resource_id)
    try:
        definition.importer(data, clients.get(definition.client), settings)
    except BlockmapError as exc:
        outcome.diagnostics.append(_error(resource, exc))
        return outcome

    outcome.id = data.id
    outcome.state = data.to_state()
    return outcome


def run(resources: List[Resource], clients: Any, settings: Optional[Settings] = None) -> List[Outcome]:
    """
    Read every data block in configuration order.

    Managed resource blocks are reported and skipped; duplicate addresses
    are errors.
    """
    settings = settings or Settings()
    outcomes: List[Outcome] = []
    seen = set()

    for r in resources:
        if r.address in seen:
            outcomes.append(Outcome(resource=r, diagnostics=[Diagnostic(
                severity=Severity.ERROR,
                summary=f"duplicate block '{r.address}'",
                address=r.address,
            )]))
            continue
        seen.add(r.address)

        if r.kind == KIND_RESOURCE:
            known = r.resource_type in REGISTRY
            outcomes.append(Outcome(resource=r, diagnostics=[Diagnostic(
                severity=Severity.WARNING,
                summary=(
                    "managed resources are not applied from configuration, skipped"
                    if known else f"unsupported resource type '{r.resource_type}', skipped"
                ),
                address=r.address,
            )]))
            continue

        outcomes.append(read_block(r, clients, settings))

    return outcomes
