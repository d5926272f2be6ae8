"""Directed graph view of a road network with shortest path routing."""

from __future__ import annotations

import math
import sys
from typing import IO, NamedTuple

from shapely.geometry import Point

from roadnet.heap import Heap
from roadnet.network import Network
from roadnet.types import DistanceMap, PredecessorMap


class _Arc(NamedTuple):
    target: int
    index: int
    length: float


def _update(heap: Heap, node: int, value: float) -> None:
    if node in heap:
        heap.decrease_key(node, value)
    else:
        heap.push(node, value)


class NetworkGraph:
    """Adjacency structure over the edges of a network, with routing queries."""

    DOUBLE_MIN = 1.0e-6
    """Tolerance used when matching an edge by its length."""

    def __init__(self, network: Network) -> None:
        self.network = network
        self.num_vertices = network.node_count
        self._out: list[list[_Arc]] = [[] for _ in range(self.num_vertices)]
        for edge in network.edges:
            self._out[edge.source].append(_Arc(edge.target, edge.index, edge.length))

    def out_arcs(self, node: int) -> list[_Arc]:
        """Outgoing arcs of a node, in the order the edges were added."""
        return self._out[node]

    def shortest_path_dijkstra(self, source: int, target: int) -> list[int]:
        """Edge indices of the shortest path from source to target."""
        if source == target:
            return []
        heap = Heap()
        pmap: PredecessorMap = {source: source}
        dmap: DistanceMap = {source: 0.0}
        heap.push(source, 0.0)
        while heap:
            node = heap.pop()
            u = node.index
            if u == target:
                break
            for arc in self._out[u]:
                v = arc.target
                temp_dist = node.value + arc.length
                known = dmap.get(v)
                if known is None:
                    heap.push(v, temp_dist)
                    pmap[v] = u
                    dmap[v] = temp_dist
                elif known > temp_dist:
                    pmap[v] = u
                    dmap[v] = temp_dist
                    _update(heap, v, temp_dist)
        return self.back_track(source, target, pmap, dmap)

    def calc_heuristic_dist(self, p1: Point, p2: Point) -> float:
        """Euclidean distance between two points."""
        return math.hypot(p2.x - p1.x, p2.y - p1.y)

    def shortest_path_astar(self, source: int, target: int) -> list[int]:
        """Edge indices of the shortest path found by A* search."""
        if source == target:
            return []
        points = self.network.vertex_points
        heap = Heap()
        pmap: PredecessorMap = {source: source}
        dmap: DistanceMap = {source: 0.0}
        heap.push(source, self.calc_heuristic_dist(points[source], points[target]))
        while heap:
            u = heap.pop().index
            if u == target:
                break
            for arc in self._out[u]:
                v = arc.target
                temp_dist = dmap[u] + arc.length
                h = self.calc_heuristic_dist(points[v], points[target])
                known = dmap.get(v)
                if known is None:
                    heap.push(v, temp_dist + h)
                    pmap[v] = u
                    dmap[v] = temp_dist
                elif known > temp_dist:
                    pmap[v] = u
                    dmap[v] = temp_dist
                    _update(heap, v, temp_dist + h)
        return self.back_track(source, target, pmap, dmap)

    def back_track(
        self, source: int, target: int, pmap: PredecessorMap, dmap: DistanceMap
    ) -> list[int]:
        """Rebuild the path to target from predecessor and distance maps."""
        if target not in dmap:
            return []
        path: list[int] = []
        v = target
        u = pmap[v]
        while v != source:
            path.append(self.get_edge_index(u, v, dmap[v] - dmap[u]))
            v = u
            u = pmap[v]
        path.reverse()
        return path

    def single_source_upperbound_dijkstra(
        self, source: int, delta: float
    ) -> tuple[PredecessorMap, DistanceMap]:
        """Shortest paths from source to every node within distance delta."""
        heap = Heap()
        pmap: PredecessorMap = {source: source}
        dmap: DistanceMap = {source: 0.0}
        heap.push(source, 0.0)
        while heap:
            node = heap.pop()
            if node.value > delta:
                break
            u = node.index
            for arc in self._out[u]:
                v = arc.target
                temp_dist = node.value + arc.length
                known = dmap.get(v)
                if known is None:
                    if temp_dist <= delta:
                        heap.push(v, temp_dist)
                        pmap[v] = u
                        dmap[v] = temp_dist
                elif known > temp_dist:
                    pmap[v] = u
                    dmap[v] = temp_dist
                    _update(heap, v, temp_dist)
        return pmap, dmap

    def get_edge_index(self, source: int, target: int, cost: float) -> int:
        """Index of the edge from source to target with the given length, or -1."""
        if not (0 <= source < self.num_vertices and 0 <= target < self.num_vertices):
            return -1
        for arc in self._out[source]:
            if arc.target == target and abs(arc.length - cost) <= self.DOUBLE_MIN:
                return arc.index
        return -1

    def find_edge(self, source: int, target: int) -> tuple[int, float] | None:
        """The shortest edge from source to target as (index, length), or None."""
        if not (0 <= source < self.num_vertices and 0 <= target < self.num_vertices):
            return None
        best: tuple[int, float] | None = None
        for arc in self._out[source]:
            if arc.target == target and (best is None or arc.length <= best[1]):
                best = (arc.index, arc.length)
        return best

    def get_edge_id(self, index: int) -> int:
        return self.network.get_edge_id(index)

    def get_node_id(self, index: int) -> int:
        return self.network.get_node_id(index)

    def get_node_index(self, node_id: int) -> int:
        return self.network.get_node_index(node_id)

    def get_vertex_point(self, index: int) -> Point:
        return self.network.get_node_geom(index)

    def print_graph(self, file: IO[str] | None = None) -> None:
        """Write one line per edge: index, edge id and its end node ids."""
        out = sys.stdout if file is None else file
        for u, arcs in enumerate(self._out):
            for arc in arcs:
                out.write(
                    f" index {arc.index} edge {self.get_edge_id(arc.index)} "
                    f"{self.get_node_id(u)} -> {self.get_node_id(arc.target)}\n"
                )