"""Direct-neighbor impact query: what must change alongside a node?

The query never follows edges transitively. A node two hops away is only
reported if it is also a direct neighbor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from flowgraph.model import Edge, Flow, FlowgraphDocument, Invariant, Node
from flowgraph.schema import (
    ImpactEdgeDTO,
    ImpactFlowDTO,
    ImpactInvariantDTO,
    ImpactReportDTO,
)


def _edge_dto(edge: Edge) -> ImpactEdgeDTO:
    return ImpactEdgeDTO(
        source=edge.source,
        target=edge.target,
        rel=edge.rel,
        note=edge.note,
        co_change=edge.is_co_change,
    )


@dataclass(frozen=True)
class FlowMembership:
    flow: Flow
    as_step: bool
    as_branch_target: bool

    @property
    def roles(self) -> tuple[str, ...]:
        roles = []
        if self.as_step:
            roles.append("step")
        if self.as_branch_target:
            roles.append("branch target")
        return tuple(roles)


@dataclass(frozen=True)
class ImpactReport:
    node: Node
    outgoing: tuple[Edge, ...]
    incoming: tuple[Edge, ...]
    flows: tuple[FlowMembership, ...]
    invariants: tuple[Invariant, ...]

    @property
    def node_id(self) -> str:
        return self.node.id

    @property
    def co_change_outgoing(self) -> tuple[Edge, ...]:
        return tuple(edge for edge in self.outgoing if edge.is_co_change)

    @property
    def co_change_incoming(self) -> tuple[Edge, ...]:
        return tuple(edge for edge in self.incoming if edge.is_co_change)

    @property
    def exit_code(self) -> int:
        return 0

    def as_dto(self) -> ImpactReportDTO:
        return ImpactReportDTO(
            node_id=self.node.id,
            found=True,
            kind=self.node.kind,
            loc=self.node.loc,
            outgoing=[_edge_dto(edge) for edge in self.outgoing],
            incoming=[_edge_dto(edge) for edge in self.incoming],
            flows=[
                ImpactFlowDTO(
                    name=member.flow.name,
                    trigger=member.flow.trigger,
                    as_step=member.as_step,
                    as_branch_target=member.as_branch_target,
                )
                for member in self.flows
            ],
            invariants=[
                ImpactInvariantDTO(
                    id=invariant.id, rule=invariant.rule, enforce=invariant.enforce
                )
                for invariant in self.invariants
            ],
        )


@dataclass(frozen=True)
class NodeNotFound:
    """Impact target missing from the node table.

    Distinct from a known node with no connections, which is an empty
    :class:`ImpactReport`.
    """

    node_id: str
    known_ids: tuple[str, ...]

    @property
    def exit_code(self) -> int:
        return 1

    def as_dto(self) -> ImpactReportDTO:
        return ImpactReportDTO(
            node_id=self.node_id, found=False, known_ids=list(self.known_ids)
        )


ImpactResult = Union[ImpactReport, NodeNotFound]


def outgoing_edges(document: FlowgraphDocument, node_id: str) -> tuple[Edge, ...]:
    return tuple(edge for edge in document.edges if edge.source == node_id)


def incoming_edges(document: FlowgraphDocument, node_id: str) -> tuple[Edge, ...]:
    return tuple(edge for edge in document.edges if edge.target == node_id)


def containing_flows(
    document: FlowgraphDocument, node_id: str
) -> tuple[FlowMembership, ...]:
    members = []
    for flow in document.flows.values():
        as_step = any(step.node == node_id for step in flow.steps)
        as_target = any(
            target == node_id for step in flow.steps for _label, target in step.targets()
        )
        if as_step or as_target:
            members.append(
                FlowMembership(flow=flow, as_step=as_step, as_branch_target=as_target)
            )
    return tuple(members)


def scoping_invariants(
    document: FlowgraphDocument, node_id: str
) -> tuple[Invariant, ...]:
    return tuple(
        invariant for invariant in document.invariants if node_id in invariant.scope
    )


def analyze_impact(document: FlowgraphDocument, node_id: str) -> ImpactResult:
    node = document.nodes.get(node_id)
    if node is None:
        return NodeNotFound(node_id=node_id, known_ids=tuple(sorted(document.nodes)))
    return ImpactReport(
        node=node,
        outgoing=outgoing_edges(document, node_id),
        incoming=incoming_edges(document, node_id),
        flows=containing_flows(document, node_id),
        invariants=scoping_invariants(document, node_id),
    )
