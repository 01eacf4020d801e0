from kvadtree._node import NE, NW, SE, SW, Node


def test_quadrant_index_and_midline_tie_break():
    n = Node((0.0, 0.0, 100.0, 100.0), 0)
    assert n.quadrant_index(10, 10) == NW
    assert n.quadrant_index(60, 10) == NE
    assert n.quadrant_index(10, 60) == SW
    assert n.quadrant_index(60, 60) == SE
    # Midlines fall to the lower index side
    assert n.quadrant_index(50, 50) == NW
    assert n.quadrant_index(50, 60) == SW
    assert n.quadrant_index(60, 50) == NE


def test_split_creates_quartered_children():
    n = Node((0.0, 0.0, 100.0, 100.0), 0)
    n.insert(10, 10, "a", 4, 1)
    assert n.is_leaf
    n.insert(90, 90, "b", 4, 1)

    assert not n.is_leaf
    assert n.entries == []
    assert [c.bounds for c in n.children] == [
        (0.0, 0.0, 50.0, 50.0),
        (50.0, 0.0, 50.0, 50.0),
        (0.0, 50.0, 50.0, 50.0),
        (50.0, 50.0, 50.0, 50.0),
    ]
    assert all(c.level == 1 for c in n.children)
    assert [len(c) for c in n.children] == [1, 0, 0, 1]


def test_cascading_split_stops_at_max_levels():
    n = Node((0.0, 0.0, 16.0, 16.0), 0)
    for p in ("a", "b", "c", "d"):
        n.insert(1.0, 1.0, p, 3, 1)

    leaf = n
    path = []
    while not leaf.is_leaf:
        path.append(leaf.level)
        leaf = leaf.children[NW]
    assert path == [0, 1, 2]
    assert leaf.level == 3
    assert len(leaf) == 4


def test_leaf_visits_newest_first():
    n = Node((0.0, 0.0, 10.0, 10.0), 0)
    for p in ("a", "b", "c"):
        n.insert(1.0, 1.0, p, 0, 1)
    seen = []
    n.walk(lambda x, y, p, ctx: seen.append(p), None)
    assert seen == ["c", "b", "a"]


def test_remove_payload_never_merges():
    n = Node((0.0, 0.0, 100.0, 100.0), 0)
    a, b = object(), object()
    n.insert(10, 10, a, 2, 1)
    n.insert(90, 90, b, 2, 1)
    assert n.remove_payload(10, 10, a) == 1
    assert n.remove_payload(90, 90, b) == 1
    assert not n.is_leaf
    assert all(c.is_leaf and len(c) == 0 for c in n.children)


def test_iter_nodes_is_preorder():
    n = Node((0.0, 0.0, 100.0, 100.0), 0)
    n.insert(10, 10, "a", 1, 1)
    n.insert(90, 90, "b", 1, 1)
    levels = [node.level for node in n.iter_nodes()]
    assert levels == [0, 1, 1, 1, 1]


def test_release_clears_subtree():
    n = Node((0.0, 0.0, 100.0, 100.0), 0)
    payloads = [object() for _ in range(5)]
    for i, p in enumerate(payloads):
        n.insert(i * 20.0, i * 20.0, p, 3, 1)
    kids = list(n.children)
    n.release()
    assert n.children is None
    assert n.is_leaf and len(n) == 0
    assert all(k.children is None and len(k) == 0 for k in kids)


def test_children_share_parent_edges_exactly():
    bounds = (303.18594544552593, 0.0, 788.7444788003996, 10.0)
    n = Node(bounds, 0)
    far_x = bounds[0] + bounds[2]
    n.insert(far_x, 1.0, "a", 3, 1)
    n.insert(far_x, 1.0, "b", 3, 1)

    leaf = n.leaf_for(far_x, 1.0)
    assert leaf.level == 3
    assert leaf.extent[2] == far_x
    assert leaf.contains(far_x, 1.0)
    for node in n.iter_nodes():
        if not node.is_leaf:
            nw, ne, sw, se = (c.extent for c in node.children)
            assert nw[2] == ne[0] == sw[2] == se[0]
            assert nw[3] == sw[1] == ne[3] == se[1]
            assert ne[2] == se[2] == node.extent[2]
            assert sw[3] == se[3] == node.extent[3]


def test_deep_cascade_does_not_exhaust_the_stack():
    n = Node((0.0, 0.0, 1.0, 1.0), 0)
    n.insert(0.1, 0.1, "a", 2000, 1)
    n.insert(0.1, 0.1, "b", 2000, 1)
    leaf = n.leaf_for(0.1, 0.1)
    assert leaf.level == 2000
    seen = []
    assert n.walk(lambda x, y, p, ctx: seen.append(p), None) == 2
    assert seen == ["b", "a"]
    assert n.find((0.0, 0.0, 1.0, 1.0), None, None) == 2
    assert sum(1 for _ in n.iter_nodes()) == 4 * 2000 + 1
    n.release()
    assert n.is_leaf
