import pytest
from shapely import wkt
from shapely.geometry import LineString, Point

from roadnet.network import Network, candidate_sort_key
from roadnet.types import Candidate, Edge

NODES = {
    1: (1, 1), 2: (2, 1), 3: (2, 3), 4: (4, 2), 5: (2, 2), 6: (3, 2),
    7: (1, 2), 8: (3, 1), 9: (4, 1), 10: (3, 3), 11: (1, 3), 12: (4, 3),
    13: (1, 0), 14: (2, 0), 15: (3, 0), 16: (4, 0), 17: (0, 2),
}

EDGES = [
    (1, 1, 2), (2, 14, 2), (3, 13, 14), (4, 14, 15), (5, 2, 5), (6, 15, 16),
    (7, 5, 3), (8, 3, 5), (9, 2, 8), (10, 8, 9), (11, 7, 5), (12, 17, 7),
    (13, 5, 6), (14, 6, 4), (15, 11, 3), (16, 3, 10), (17, 10, 12), (18, 8, 6),
]


@pytest.fixture
def network():
    net = Network()
    for edge_id, s, t in EDGES:
        net.add_edge(edge_id, s, t, LineString([NODES[s], NODES[t]]))
    return net


def coords(line):
    return [tuple(c) for c in line.coords]


def test_node_edge_getters(network):
    nidx = network.get_node_index(6)
    assert network.get_node_id(nidx) == 6
    p = network.get_node_geom(nidx)
    assert (p.x, p.y) == (3.0, 2.0)
    e_idx = network.get_edge_index(5)
    assert network.get_edge_id(e_idx) == 5
    assert network.node_count == 17
    assert network.get_edge_geom(5).equals(wkt.loads("LineString(2 1,2 2)"))


def test_search_tr_cs_knn(network):
    line = wkt.loads("LineString(2.1 1.9,2.1 2.8)")
    trcs = network.search_tr_cs_knn(line, 3, 0.15)
    assert len(trcs) == 2
    assert len(trcs[0]) == 3
    assert len(trcs[1]) == 2
    assert network.search_tr_cs_knn(line, 3, 0.05) == []
    line = wkt.loads("LineString(2.0 1.0,2.1 2.8)")
    assert network.search_tr_cs_knn(line, 3, 0.05) == []


def test_search_keeps_nearest_and_numbers_candidates(network):
    line = wkt.loads("LineString(2.1 1.9,2.1 2.8)")
    trcs = network.search_tr_cs_knn(line, 3, 0.15)
    assert {c.edge.id for c in trcs[0]} == {5, 13, 7}
    assert {c.edge.id for c in trcs[1]} == {7, 8}
    assert [c.index for step in trcs for c in step] == [17, 18, 19, 20, 21]
    first = trcs[0]
    assert sorted(first, key=candidate_sort_key) == first
    c5 = next(c for c in first if c.edge.id == 5)
    assert c5.offset == pytest.approx(0.9)
    assert c5.dist == pytest.approx(0.1)
    assert (c5.point.x, c5.point.y) == pytest.approx((2.0, 1.9))


def test_candidate_sort_key_orders_by_dist_then_index():
    geom = LineString([(0, 0), (1, 0)])
    e1 = Edge(1, 10, 0, 1, 1.0, geom)
    e2 = Edge(2, 20, 0, 1, 1.0, geom)
    a = Candidate(0, 0.0, 0.5, e2, Point(0, 0))
    b = Candidate(0, 0.0, 0.5, e1, Point(0, 0))
    c = Candidate(0, 0.0, 0.1, e2, Point(0, 0))
    assert sorted([a, b, c], key=candidate_sort_key) == [c, b, a]


def test_out_of_range_and_unknown_ids(network):
    assert network.get_edge_id(100) == -1
    assert network.get_node_id(100) == -1
    with pytest.raises(KeyError):
        network.get_edge_index(999)
    with pytest.raises(KeyError):
        network.get_node_index(999)


def test_edge_lookup_by_id_and_index(network):
    edge = network.get_edge(13)
    assert edge.index == 12
    assert network.edge_at(12) is edge
    assert edge.length == pytest.approx(1.0)
    assert network.get_node_id(edge.source) == 5
    assert network.get_node_id(edge.target) == 6


def test_route_to_geometry(network):
    line = network.route_to_geometry([5, 13, 14])
    assert coords(line) == [(2, 1), (2, 2), (3, 2), (4, 2)]
    assert network.route_to_geometry([]).is_empty


def test_route_indices_to_geometry(network):
    path = [network.get_edge_index(e) for e in (5, 13, 14)]
    line = network.route_indices_to_geometry(path)
    assert coords(line) == [(2, 1), (2, 2), (3, 2), (4, 2)]


def test_complete_path_to_geometry_multiple_edges(network):
    traj = LineString([(2, 1.25), (3.5, 2)])
    line = network.complete_path_to_geometry(traj, [5, 13, 14])
    assert coords(line) == pytest.approx([(2, 1.25), (2, 2), (3, 2), (3.5, 2)])


def test_complete_path_to_geometry_single_edge(network):
    traj = LineString([(2.05, 1.2), (1.95, 1.7)])
    line = network.complete_path_to_geometry(traj, [5])
    assert coords(line) == pytest.approx([(2, 1.2), (2, 1.7)])


def test_complete_path_to_geometry_empty(network):
    traj = LineString([(2, 1.2), (2, 1.7)])
    assert network.complete_path_to_geometry(traj, []).is_empty


def test_add_edge_reuses_nodes_and_refreshes_index():
    net = Network()
    net.add_edge(1, 100, 200, LineString([(0, 0), (1, 0)]))
    net.add_edge(2, 200, 300, [(1, 0), (1, 1)])
    assert net.node_count == 3
    assert net.edge_count == 2
    assert net.get_edge(2).source == net.get_node_index(200)
    found = net.search_tr_cs_knn(LineString([(1.05, 0.5), (1.0, 0.9)]), 4, 0.1)
    assert [c.edge.id for c in found[0]] == [2]
    net.add_edge(3, 300, 400, LineString([(1, 1), (1, 2)]))
    found = net.search_tr_cs_knn(LineString([(1.05, 1.5), (1.0, 1.9)]), 4, 0.1)
    assert [c.edge.id for c in found[0]] == [3]


def test_add_edge_rejects_degenerate_geometry():
    net = Network()
    with pytest.raises(ValueError):
        net.add_edge(1, 1, 2, LineString())