# roadnet

A directed road network for map matching: edges with line geometries,
k-nearest candidate search around GPS points, path geometry, and
shortest-path routing (Dijkstra, A* and a distance-bounded Dijkstra search).

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Building a network

`roadnet.network.Network` is built in memory, edge by edge. Each edge has an
edge id, source and target node ids, and a `shapely.geometry.LineString`
(or a sequence of coordinates) with at least two points. Node ids are mapped
to continuous node indices in the order they are first seen, and a node's
position is taken from the first or last point of the edge that introduced it.

```python
from shapely.geometry import LineString
from roadnet.network import Network

network = Network()
network.add_edge(1, 1, 2, LineString([(0, 0), (1, 0)]))
network.add_edge(2, 2, 3, LineString([(1, 0), (1, 1)]))
network.add_edge(3, 1, 3, LineString([(0, 0), (0, 2), (1, 1)]))

index = network.get_node_index(2)
print(network.get_node_id(index))          # 2
print(network.get_edge_geom(2))            # LINESTRING (1 0, 1 1)
print(network.node_count, network.edge_count)
```

Lookups by id (`get_edge`, `get_edge_index`, `get_node_index`) raise
`KeyError` for unknown ids; lookups by index (`get_edge_id`, `get_node_id`)
return `-1` when the index is out of range.

## Candidate search

`Network.search_tr_cs_knn(geom, k, radius)` returns, for every point of a
line, up to `k` candidate edges whose geometry lies within `radius`, closest
first (ties broken by edge index). Each `roadnet.types.Candidate` carries
the edge, the distance to it, the offset along it and the closest point.
Candidate indices are numbered from the network's node count upwards. If any
point has no candidate, the result is an empty list.

```python
trajectory = LineString([(0.1, 0.05), (0.95, 0.5)])
candidates = network.search_tr_cs_knn(trajectory, 3, 0.2)
for point_candidates in candidates:
    for c in point_candidates:
        print(c.index, c.edge.id, c.dist, c.offset)
```

Path geometry can be rebuilt from edge ids with `Network.route_to_geometry`,
from edge indices with `Network.route_indices_to_geometry`, or clipped to a
trajectory's first and last points with `Network.complete_path_to_geometry`.

## Routing

`roadnet.network_graph.NetworkGraph` gives an adjacency view of a network.
Routes are returned as lists of edge indices.

```python
from roadnet.network_graph import NetworkGraph

graph = NetworkGraph(network)
source = network.get_node_index(1)
target = network.get_node_index(3)

path = graph.shortest_path_dijkstra(source, target)
print([network.get_edge_id(i) for i in path])          # [1, 2]
print(graph.shortest_path_astar(source, target))

pmap, dmap = graph.single_source_upperbound_dijkstra(source, 5.0)

print(graph.find_edge(source, network.get_node_index(2)))   # (index, length)
graph.print_graph()
```

`get_edge_index(source, target, cost)` finds the edge between two nodes whose
length matches `cost` within `NetworkGraph.DOUBLE_MIN`, returning `-1` if
there is none.

## Other pieces

- `roadnet.heap.Heap`: a min-heap of node indices with `push`, `pop`, `top`,
  `decrease_key`, `len()` and `in`.
- `roadnet.types`: dataclasses for edges, candidates and match results.
- `roadnet.util`: helpers for strings (`split_string`, `string2bool`,
  `vec2string`, `string2vec`), files (`file_exists`, `folder_exist`,
  `check_file_extension`, `get_file_directory`), timing (`get_current_time`,
  `get_duration`, `format_time`), line reading (`iter_safe_lines`) and text
  output of candidates, paths and points.

## What it does not do

The package does not read road networks or trajectories from files; networks
are assembled with `Network.add_edge`. It provides no command-line program,
no map matching algorithm itself (only the types for its results), no
bidirectional search and no standalone point index.