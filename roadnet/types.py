"""Core data types shared by the network, routing and matching code."""

from __future__ import annotations

from dataclasses import dataclass, field

from shapely.geometry import LineString, Point

NodeID = int
EdgeID = int
NodeIndex = int
EdgeIndex = int

PredecessorMap = dict[int, int]
"""For each node index, the node visited before it on a shortest path."""

SuccessorMap = dict[int, int]
"""For each node index, the node visited after it on a shortest path."""

DistanceMap = dict[int, float]
"""For each node index, its distance from the search origin."""


@dataclass
class Edge:
    """A directed road edge of the network."""

    index: int
    id: int
    source: int
    target: int
    length: float
    geom: LineString


@dataclass
class Candidate:
    """An edge location that a GPS point may be matched to."""

    index: int
    offset: float
    dist: float
    edge: Edge
    point: Point


@dataclass
class MatchedCandidate:
    """A candidate chosen for a point, with the probabilities of the match."""

    c: Candidate
    ep: float
    tp: float
    sp_dist: float


@dataclass
class MatchResult:
    """Map matching result of one trajectory."""

    id: int
    opt_candidate_path: list[MatchedCandidate] = field(default_factory=list)
    opath: list[int] = field(default_factory=list)
    cpath: list[int] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)
    mgeom: LineString = field(default_factory=LineString)


@dataclass
class PyCandidate:
    """Flat description of a matched candidate."""

    index: int
    edge_id: int
    source: int
    target: int
    error: float
    offset: float
    length: float
    ep: float
    tp: float
    spdist: float


@dataclass
class PyMatchResult:
    """Flat description of a map matching result."""

    id: int
    opath: list[int] = field(default_factory=list)
    cpath: list[int] = field(default_factory=list)
    candidates: list[PyCandidate] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)
    mgeom: LineString = field(default_factory=LineString)
    pgeom: LineString = field(default_factory=LineString)