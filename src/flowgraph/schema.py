from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# Document boundary. Unknown keys are kept so node metadata survives the load.
# Missing reference fields load as "" and surface as verification records.


class MetaDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    root: str = ""
    description: Optional[str] = None


class NodeDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    kind: Optional[str] = None
    loc: str = ""
    schema_name: Optional[str] = Field(default=None, alias="schema")
    values: List[Any] = []
    fk: List[Any] = []


class EdgeDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    source: str = Field(default="", alias="from")
    target: str = Field(default="", alias="to")
    rel: str = ""
    note: Optional[str] = None


class StepDTO(BaseModel):
    node: str = ""
    then: Union[str, Dict[str, str]] = "next"


class FlowDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    trigger: str = ""
    steps: List[StepDTO] = []


class InvariantDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = ""
    rule: str = ""
    scope: List[str] = []
    enforce: Optional[str] = None


class DocumentDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    version: Optional[Union[str, int, float]] = Field(default=None, alias="$flowgraph")
    meta: MetaDTO = Field(default_factory=MetaDTO)
    nodes: Dict[str, NodeDTO] = {}
    edges: List[EdgeDTO] = []
    flows: Dict[str, FlowDTO] = {}
    invariants: List[InvariantDTO] = []


# Report boundary, used for `--json` output.


class CheckResultDTO(BaseModel):
    status: str
    category: str
    id: str
    message: str


class SummaryDTO(BaseModel):
    passed: int
    failed: int
    warned: int
    total: int


class VerificationReportDTO(BaseModel):
    name: str
    version: Optional[str] = None
    results: List[CheckResultDTO]
    categories: Dict[str, SummaryDTO]
    summary: SummaryDTO
    exit_code: int


class ImpactEdgeDTO(BaseModel):
    source: str
    target: str
    rel: str
    note: Optional[str] = None
    co_change: bool = False


class ImpactFlowDTO(BaseModel):
    name: str
    trigger: str
    as_step: bool
    as_branch_target: bool


class ImpactInvariantDTO(BaseModel):
    id: str
    rule: str
    enforce: Optional[str] = None


class ImpactReportDTO(BaseModel):
    node_id: str
    found: bool
    kind: Optional[str] = None
    loc: Optional[str] = None
    outgoing: List[ImpactEdgeDTO] = []
    incoming: List[ImpactEdgeDTO] = []
    flows: List[ImpactFlowDTO] = []
    invariants: List[ImpactInvariantDTO] = []
    known_ids: List[str] = []
