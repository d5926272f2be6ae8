"""Road network: edges, nodes, spatial candidate search and path geometry."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Sequence

from shapely import STRtree, box
from shapely.geometry import LineString, Point

from roadnet.types import Candidate, Edge

_VERTEX_TOLERANCE = 1e-9

Coord = tuple[float, float]


def candidate_sort_key(candidate: Candidate) -> tuple[float, int]:
    """Order candidates by distance to the GPS point, then by edge index."""
    return (candidate.dist, candidate.edge.index)


def _cumulative_lengths(coords: Sequence[Coord]) -> list[float]:
    cum = [0.0]
    for (x1, y1), (x2, y2) in zip(coords, coords[1:]):
        cum.append(cum[-1] + ((x2 - x1) ** 2 + (y2 - y1) ** 2) ** 0.5)
    return cum


def _point_at(coords: Sequence[Coord], cum: Sequence[float], offset: float) -> Coord:
    """Locate the point lying at a distance along a polyline."""
    for (x, y), d in zip(coords, cum):
        if abs(d - offset) <= _VERTEX_TOLERANCE:
            return (x, y)
    if offset <= 0:
        return coords[0]
    for i in range(len(coords) - 1):
        seg_start, seg_end = cum[i], cum[i + 1]
        if seg_end - seg_start <= 0:
            continue
        if offset <= seg_end:
            t = (offset - seg_start) / (seg_end - seg_start)
            (x1, y1), (x2, y2) = coords[i], coords[i + 1]
            return (x1 + t * (x2 - x1), y1 + t * (y2 - y1))
    return coords[-1]


def _cut(line: LineString, start: float, end: float) -> list[Coord]:
    """Return the coordinates of the part of a line between two offsets."""
    coords = [(float(x), float(y)) for x, y in line.coords]
    cum = _cumulative_lengths(coords)
    total = cum[-1]
    start = min(max(start, 0.0), total)
    end = min(max(end, 0.0), total)
    result = [_point_at(coords, cum, start)]
    result.extend(
        coord
        for coord, d in zip(coords, cum)
        if start + _VERTEX_TOLERANCE < d < end - _VERTEX_TOLERANCE
    )
    result.append(_point_at(coords, cum, end))
    return result


def _linear_referencing(x: float, y: float, line: LineString) -> tuple[float, float, Point]:
    """Return distance to the line, offset along it and the closest point."""
    p = Point(x, y)
    offset = line.project(p)
    return line.distance(p), offset, line.interpolate(offset)


def _to_line(coords: list[Coord]) -> LineString:
    return LineString(coords) if coords else LineString()


def _append(line: list[Coord], segs: Iterable[Coord], skip: int) -> None:
    line.extend(list(segs)[skip:])


class Network:
    """A directed road network built edge by edge."""

    def __init__(self) -> None:
        self.srid = 4326
        self._edges: list[Edge] = []
        self._node_ids: list[int] = []
        self._node_map: dict[int, int] = {}
        self._edge_map: dict[int, int] = {}
        self._vertex_points: list[Point] = []
        self._rtree: STRtree | None = None

    @property
    def edges(self) -> list[Edge]:
        """All edges, ordered by edge index."""
        return self._edges

    @property
    def vertex_points(self) -> list[Point]:
        """Node positions, ordered by node index."""
        return self._vertex_points

    @property
    def node_count(self) -> int:
        return len(self._node_ids)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def _node_index_for(self, node_id: int, point: Point) -> int:
        index = self._node_map.get(node_id)
        if index is None:
            index = len(self._node_ids)
            self._node_ids.append(node_id)
            self._node_map[node_id] = index
            self._vertex_points.append(point)
        return index

    def add_edge(self, edge_id: int, source: int, target: int, geom) -> Edge:
        """Add a directed edge between two nodes with the given geometry."""
        line = geom if isinstance(geom, LineString) else LineString(geom)
        coords = list(line.coords)
        if len(coords) < 2:
            raise ValueError("edge geometry needs at least two points")
        s_idx = self._node_index_for(source, Point(coords[0]))
        t_idx = self._node_index_for(target, Point(coords[-1]))
        edge = Edge(len(self._edges), edge_id, s_idx, t_idx, line.length, line)
        self._edges.append(edge)
        self._edge_map[edge_id] = edge.index
        self._rtree = None
        return edge

    def get_edge(self, edge_id: int) -> Edge:
        """Return the edge with the given id."""
        return self._edges[self.get_edge_index(edge_id)]

    def edge_at(self, index: int) -> Edge:
        """Return the edge at the given index."""
        return self._edges[index]

    def get_edge_id(self, index: int) -> int:
        """Return the id of the edge at an index, or -1 if out of range."""
        return self._edges[index].id if 0 <= index < len(self._edges) else -1

    def get_edge_index(self, edge_id: int) -> int:
        """Return the index of an edge id; raise KeyError if unknown."""
        return self._edge_map[edge_id]

    def get_node_id(self, index: int) -> int:
        """Return the id of the node at an index, or -1 if out of range."""
        return self._node_ids[index] if 0 <= index < len(self._node_ids) else -1

    def get_node_index(self, node_id: int) -> int:
        """Return the index of a node id; raise KeyError if unknown."""
        return self._node_map[node_id]

    def get_node_geom(self, index: int) -> Point:
        """Return the position of the node at an index."""
        return self._vertex_points[index]

    def get_edge_geom(self, edge_id: int) -> LineString:
        """Return the geometry of the edge with the given id."""
        return self.get_edge(edge_id).geom

    def _tree(self) -> STRtree:
        if self._rtree is None:
            self._rtree = STRtree([edge.geom for edge in self._edges])
        return self._rtree

    def search_tr_cs_knn(self, geom: LineString, k: int, radius: float) -> list[list[Candidate]]:
        """Find up to k candidate edges within radius of each point of a line.

        Returns an empty list if any point has no candidate.
        """
        tree = self._tree()
        result: list[list[Candidate]] = []
        next_index = self.node_count
        for px, py in geom.coords:
            query_box = box(px - radius, py - radius, px + radius, py + radius)
            found: list[Candidate] = []
            for item in sorted(int(i) for i in tree.query(query_box)):
                edge = self._edges[item]
                dist, offset, closest = _linear_referencing(px, py, edge.geom)
                if dist <= radius:
                    found.append(Candidate(0, offset, dist, edge, closest))
            if not found:
                return []
            if len(found) > k:
                found = sorted(found, key=candidate_sort_key)[:k]
            result.append(
                [
                    dataclasses.replace(c, index=next_index + m)
                    for m, c in enumerate(found)
                ]
            )
            next_index += len(found)
        return result

    def complete_path_to_geometry(self, traj: LineString, complete_path: Sequence[int]) -> LineString:
        """Geometry of a path of edge ids, clipped at the trajectory's ends."""
        if not complete_path:
            return LineString()
        traj_coords = list(traj.coords)
        (fx, fy), (lx, ly) = traj_coords[0], traj_coords[-1]
        line: list[Coord] = []
        first_seg = self.get_edge_geom(complete_path[0])
        _, first_offset, _ = _linear_referencing(fx, fy, first_seg)
        if len(complete_path) == 1:
            _, last_offset, _ = _linear_referencing(lx, ly, first_seg)
            _append(line, _cut(first_seg, first_offset, last_offset), 0)
            return _to_line(line)
        last_seg = self.get_edge_geom(complete_path[-1])
        _, last_offset, _ = _linear_referencing(lx, ly, last_seg)
        _append(line, _cut(first_seg, first_offset, first_seg.length), 0)
        for edge_id in complete_path[1:-1]:
            _append(line, self.get_edge_geom(edge_id).coords, 1)
        _append(line, _cut(last_seg, 0.0, last_offset), 1)
        return _to_line(line)

    def _edges_to_geometry(self, edges: Iterable[Edge]) -> LineString:
        line: list[Coord] = []
        for i, edge in enumerate(edges):
            _append(line, edge.geom.coords, 0 if i == 0 else 1)
        return _to_line(line)

    def route_to_geometry(self, path: Sequence[int]) -> LineString:
        """Geometry of a route given as edge ids."""
        return self._edges_to_geometry(self.get_edge(edge_id) for edge_id in path)

    def route_indices_to_geometry(self, path: Sequence[int]) -> LineString:
        """Geometry of a route given as edge indices."""
        return self._edges_to_geometry(self._edges[index] for index in path)