"""Tests for the span forest builder."""

from hypothesis import given, settings
from hypothesis import strategies as st

from conftest import make_span
from stdout_tree.render.tree import build_forest


def _ids(forest, indices):
    return [forest.nodes[i].record.span_id for i in indices]


def _walk_ids(forest):
    return [(node.record.span_id, node.depth) for node in forest.walk()]


class TestBuildForest:
    """Tests for build_forest()."""

    def test_empty_batch(self):
        forest = build_forest([])
        assert len(forest) == 0
        assert forest.roots == []
        assert list(forest.walk()) == []

    def test_children_ordered_by_start(self, scenario_spans):
        forest = build_forest(scenario_spans)

        assert _ids(forest, forest.roots) == ["root"]
        assert _walk_ids(forest) == [
            ("root", 0),
            ("m1", 1),
            ("m2", 1),
            ("m3", 1),
            ("c1", 2),
        ]

    def test_start_ties_broken_by_span_id(self):
        spans = [
            make_span("b", 0, 10, parent="r"),
            make_span("a", 0, 10, parent="r"),
            make_span("r", 0, 20),
        ]
        forest = build_forest(spans)
        assert [span_id for span_id, _ in _walk_ids(forest)] == ["r", "a", "b"]

    def test_orphan_becomes_root(self):
        spans = [
            make_span("root", 0, 100),
            make_span("orphan", 50, 60, parent="missing"),
        ]
        forest = build_forest(spans)
        assert _ids(forest, forest.roots) == ["root", "orphan"]
        assert all(node.depth == 0 for node in forest.nodes)

    def test_roots_ordered_across_traces(self):
        spans = [
            make_span("late", 30, 40, trace_id="b" * 32),
            make_span("early", 10, 20, trace_id="a" * 32),
        ]
        forest = build_forest(spans)
        assert _ids(forest, forest.roots) == ["early", "late"]

    def test_duplicate_span_id_last_write_wins(self):
        spans = [
            make_span("root", 0, 100),
            make_span("dup", 10, 20, parent="root", name="first"),
            make_span("dup", 10, 30, parent="root", name="second"),
        ]
        forest = build_forest(spans)
        assert len(forest) == 2
        names = [node.record.name for node in forest.walk()]
        assert names == ["span root", "second"]

    def test_self_parent_is_root(self):
        forest = build_forest([make_span("loop", 0, 10, parent="loop")])
        assert _ids(forest, forest.roots) == ["loop"]

    def test_parent_cycle_is_broken(self):
        spans = [
            make_span("a", 10, 20, parent="b"),
            make_span("b", 5, 30, parent="a"),
            make_span("c", 12, 14, parent="a"),
        ]
        forest = build_forest(spans)

        # Earliest span of the cycle is promoted
        assert _ids(forest, forest.roots) == ["b"]
        assert _walk_ids(forest) == [("b", 0), ("a", 1), ("c", 2)]

    def test_child_of_cycle_keeps_its_parent(self):
        # c starts before every span of the a/b cycle but is not part of it
        spans = [
            make_span("a", 10, 20, parent="b"),
            make_span("b", 5, 30, parent="a"),
            make_span("c", 1, 3, parent="a"),
        ]
        forest = build_forest(spans)

        assert _ids(forest, forest.roots) == ["b"]
        assert _walk_ids(forest) == [("b", 0), ("a", 1), ("c", 2)]

    def test_two_cycles_each_broken_once(self):
        spans = [
            make_span("a", 10, 20, parent="b"),
            make_span("b", 5, 30, parent="a"),
            make_span("x", 50, 60, parent="y"),
            make_span("y", 40, 70, parent="x"),
            make_span("z", 0, 1, parent="x"),
        ]
        forest = build_forest(spans)

        assert _ids(forest, forest.roots) == ["b", "y"]
        assert _walk_ids(forest) == [("b", 0), ("a", 1), ("y", 0), ("x", 1), ("z", 2)]

    def test_deep_chain_does_not_recurse(self):
        spans = [make_span("s0", 0, 10_000)]
        spans += [
            make_span(f"s{i}", i, 10_000 - i, parent=f"s{i - 1}") for i in range(1, 3000)
        ]
        forest = build_forest(spans)
        nodes = list(forest.walk())
        assert len(nodes) == 3000
        assert nodes[-1].depth == 2999

    def test_missing_timestamps_sort_first(self):
        spans = [
            make_span("r", 0, 10),
            make_span("x", 5, 6, parent="r"),
            make_span("y", None, None, parent="r"),
        ]
        forest = build_forest(spans)
        assert [span_id for span_id, _ in _walk_ids(forest)] == ["r", "y", "x"]


@st.composite
def span_batches(draw):
    """Batches with arbitrary parent links, including dangling ones and cycles."""
    count = draw(st.integers(min_value=1, max_value=25))
    ids = [f"{i:04x}" for i in range(count)]
    spans = []
    for span_id in ids:
        parent = draw(st.one_of(st.none(), st.sampled_from(ids + ["ffff"])))
        start = draw(st.integers(min_value=0, max_value=1000))
        length = draw(st.integers(min_value=0, max_value=1000))
        spans.append(make_span(span_id, start, start + length, parent=parent))
    return spans


@given(span_batches())
@settings(max_examples=100)
def test_every_span_appears_exactly_once(spans):
    forest = build_forest(spans)
    visited = [node.record.span_id for node in forest.walk()]
    assert sorted(visited) == sorted(span.span_id for span in spans)


@given(span_batches())
@settings(max_examples=100)
def test_children_follow_parent_at_next_depth(spans):
    forest = build_forest(spans)
    order = {node.record.span_id: pos for pos, node in enumerate(forest.walk())}

    for node in forest.nodes:
        starts = []
        for child_index in node.children:
            child = forest.nodes[child_index]
            assert child.depth == node.depth + 1
            assert order[child.record.span_id] > order[node.record.span_id]
            starts.append((child.record.start_time, child.record.span_id))
        assert starts == sorted(starts)


def _on_parent_cycle(span_id, parents):
    current = parents.get(span_id)
    for _ in range(len(parents)):
        if current is None or current not in parents:
            return False
        if current == span_id:
            return True
        current = parents[current]
    return False


@given(span_batches())
@settings(max_examples=100)
def test_resolvable_parent_kept_unless_on_cycle(spans):
    forest = build_forest(spans)
    parents = {span.span_id: span.parent_span_id for span in spans}

    for node in forest.nodes:
        record = node.record
        if record.parent_span_id in parents and record.parent_span_id != record.span_id:
            if node.parent is None:
                assert _on_parent_cycle(record.span_id, parents)
            else:
                assert forest.nodes[node.parent].record.span_id == record.parent_span_id
