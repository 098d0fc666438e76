import copy

import pytest

from madios.structures import (
    ADIOSParams,
    EquivalenceClass,
    LexiconType,
    ParseTree,
    RDSNode,
    SearchPath,
    SignificantPattern,
)


def test_params_keep_values():
    params = ADIOSParams(eta=0.9, alpha=0.01, context_size=5, overlap_threshold=0.65)
    assert (params.eta, params.alpha, params.context_size) == (0.9, 0.01, 5)


@pytest.mark.parametrize("eta, alpha", [(-0.1, 0.5), (1.5, 0.5), (0.5, -0.2), (0.5, 2.0)])
def test_params_reject_out_of_range(eta, alpha):
    with pytest.raises(ValueError):
        ADIOSParams(eta=eta, alpha=alpha, context_size=3, overlap_threshold=0.5)


def test_search_path_segment_is_inclusive():
    path = SearchPath([0, 4, 5, 6, 1])
    assert path.segment(1, 3) == [4, 5, 6]
    assert isinstance(path.segment(1, 3), SearchPath)


def test_search_path_segment_bounds():
    path = SearchPath([0, 4, 1])
    with pytest.raises(IndexError):
        path.segment(1, 3)
    with pytest.raises(IndexError):
        path.segment(2, 1)


def test_search_path_substitute_leaves_original():
    path = SearchPath([0, 4, 5, 6, 1])
    result = path.substitute(1, 3, [7, 8, 9])
    assert result == [0, 7, 8, 9, 1]
    assert path == [0, 4, 5, 6, 1]


def test_search_path_substitute_whole_segment_round_trip():
    path = SearchPath([0, 2, 3, 1])
    assert path.substitute(1, 2, path.segment(1, 2)) == path


def test_search_path_rewire_in_place():
    path = SearchPath([0, 4, 5, 6, 1])
    path.rewire(1, 2, 9)
    assert path == [0, 9, 6, 1]


def test_equivalence_class_add_is_unique():
    ec = EquivalenceClass()
    assert ec.add(3) is True
    assert ec.add(3) is False
    ec.add(5)
    assert list(ec) == [3, 5]
    assert len(ec) == 2


def test_equivalence_class_has():
    ec = EquivalenceClass([2, 4])
    assert ec.has(4)
    assert not ec.has(3)
    assert 2 in ec


def test_equivalence_class_overlap_keeps_order():
    ec = EquivalenceClass([7, 3, 5, 9])
    other = EquivalenceClass([9, 5, 11])
    assert ec.overlap(other) == EquivalenceClass([5, 9])


def test_equivalence_class_overlap_is_subset():
    ec = EquivalenceClass([1, 2, 3])
    common = ec.overlap([2, 3, 4])
    assert all(ec.has(unit) for unit in common)
    assert len(common) <= len(ec)


def test_significant_pattern_find():
    sp = SignificantPattern([4, 6, 4, 8])
    assert sp.find(6) == 1
    assert sp.find(4) == 0
    with pytest.raises(ValueError):
        sp.find(5)


def test_parse_tree_initial_leaves_match_path():
    path = [0, 3, 4, 5, 1]
    tree = ParseTree(path)
    assert tree.leaves() == path
    assert tree.top_level == path
    assert len(tree.nodes) == len(path) + 1


def test_parse_tree_rewire_groups_children():
    path = [0, 3, 4, 5, 1]
    tree = ParseTree(path)
    tree.rewire(1, 3, 9)
    assert tree.top_level == [0, 9, 1]
    assert tree.leaves() == path
    new_node = tree.nodes[-1]
    assert [tree.nodes[c].value for c in new_node.children] == [3, 4, 5]


def test_parse_tree_nested_rewire_preserves_leaves():
    path = [0, 3, 4, 5, 1]
    tree = ParseTree(path)
    tree.rewire(2, 2, 7)
    tree.rewire(1, 3, 9)
    assert tree.top_level == [0, 9, 1]
    assert tree.leaves() == path


def test_parse_tree_rewire_out_of_range():
    tree = ParseTree([0, 2, 1])
    with pytest.raises(IndexError):
        tree.rewire(2, 3, 9)


def test_parse_tree_deepcopy_is_independent():
    tree = ParseTree([0, 2, 3, 1])
    duplicate = copy.deepcopy(tree)
    duplicate.rewire(1, 2, 8)
    assert tree.top_level == [0, 2, 3, 1]
    assert duplicate.top_level == [0, 8, 1]


def test_rds_node_add_connection():
    node = RDSNode("cat", LexiconType.SYMBOL)
    node.add_connection((0, 2))
    node.add_connection([1, 4])
    assert node.connections == [(0, 2), (1, 4)]
    assert node.parents == []


def test_rds_nodes_do_not_share_lists():
    first = RDSNode(None, LexiconType.START)
    second = RDSNode(None, LexiconType.END)
    first.add_connection((0, 0))
    assert second.connections == []