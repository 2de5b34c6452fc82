"""Unit tests for graph normalization and color schemes."""

import pytest

from conftest import raw_node, raw_rel
from graphlens.graph.config import DEFAULT_PALETTE, CaptionConfig, GraphViewConfig
from graphlens.graph.normalizer import GraphNormalizer, dedupe_nodes, derive_caption, normalize
from graphlens.graph.scheme import SchemeAssigner
from graphlens.models.raw import GraphPayload, RawNode


def normalize_response(response: dict, config: GraphViewConfig | None = None):
    payload = GraphPayload.from_response(response)
    return normalize(payload.nodes, payload.relationships, config)


class TestSchemeAssigner:
    """Tests for first-seen color assignment."""

    def test_first_seen_order(self) -> None:
        """Test colors follow first-seen order, not alphabetical order."""
        assigner = SchemeAssigner()
        assigner.assign_all(["Zebra", "Apple", "Zebra"])
        assert assigner.scheme == {"Zebra": DEFAULT_PALETTE[0], "Apple": DEFAULT_PALETTE[1]}

    def test_assign_is_stable(self) -> None:
        """Test a known key keeps its color."""
        assigner = SchemeAssigner()
        first = assigner.assign("Person")
        assigner.assign("Place")
        assert assigner.assign("Person") == first
        assert len(assigner) == 2
        assert "Place" in assigner

    def test_palette_cycles(self) -> None:
        """Test assignment wraps around when the palette is exhausted."""
        assigner = SchemeAssigner(palette=("#000", "#fff"))
        assigner.assign_all(["a", "b", "c"])
        assert assigner.color_of("c") == "#000"

    def test_unknown_key_has_no_color(self) -> None:
        """Test color_of does not assign."""
        assigner = SchemeAssigner()
        assert assigner.color_of("Ghost") == ""
        assert len(assigner) == 0

    def test_empty_palette_rejected(self) -> None:
        """Test a palette needs at least one color."""
        with pytest.raises(ValueError):
            SchemeAssigner(palette=())

    def test_order_dependence(self) -> None:
        """Test the same labels in a different order give a different scheme."""
        first = SchemeAssigner()
        first.assign_all(["A", "B"])
        second = SchemeAssigner()
        second.assign_all(["B", "A"])
        assert first.scheme != second.scheme


class TestDeriveCaption:
    """Tests for caption precedence."""

    def test_document_prefers_file_name(self) -> None:
        """Test documents are captioned by file name."""
        caption = derive_caption(
            ("Document",), {"name": "n", "fileName": "a.pdf"}, CaptionConfig()
        )
        assert caption == "a.pdf"

    def test_default_precedence(self) -> None:
        """Test the default property order."""
        config = CaptionConfig()
        assert derive_caption(("Person",), {"id": "x", "name": "Alice"}, config) == "Alice"
        assert derive_caption(("Person",), {"id": "x"}, config) == "x"

    def test_falls_back_to_first_label(self) -> None:
        """Test nodes without caption properties use their first label."""
        assert derive_caption(("Person", "Actor"), {"age": 3}, CaptionConfig()) == "Person"

    def test_skips_empty_and_nested_values(self) -> None:
        """Test empty strings and nested values are not captions."""
        props = {"name": "", "fileName": {"a": 1}, "title": "T"}
        assert derive_caption(("Thing",), props, CaptionConfig()) == "T"

    def test_no_labels_no_properties(self) -> None:
        """Test a bare record gets an empty caption."""
        assert derive_caption((), {}, CaptionConfig()) == ""

    def test_numeric_caption(self) -> None:
        """Test numeric values are stringified."""
        assert derive_caption(("Chunk",), {"id": 7}, CaptionConfig()) == "7"


class TestNormalize:
    """Tests for GraphNormalizer."""

    def test_document_chunk_scenario(self) -> None:
        """Test a document and its chunk joined by one relationship."""
        graph = normalize_response(
            {
                "nodes": [
                    raw_node("d", ["Document"], fileName="a.pdf"),
                    raw_node("c", ["Chunk"], id="c-1"),
                ],
                "relationships": [raw_rel("r", "HAS_CHUNK", "d", "c")],
            }
        )
        assert len(graph.nodes) == 2
        assert len(graph.relationships) == 1
        assert len(graph.scheme) == 2
        assert list(graph.scheme) == ["Document", "Chunk"]

    def test_dangling_relationship_dropped(self) -> None:
        """Test a relationship with a missing endpoint is dropped."""
        graph = normalize_response(
            {
                "nodes": [raw_node("a", ["Person"])],
                "relationships": [raw_rel("r", "KNOWS", "missing", "a")],
            }
        )
        assert len(graph.nodes) == 1
        assert len(graph.relationships) == 0

    def test_last_seen_content_wins(self) -> None:
        """Test duplicate ids keep the first position and the last content."""
        graph = normalize_response(
            {
                "nodes": [
                    raw_node("a", ["Person"], name="old"),
                    raw_node("b", ["Person"], name="Bob"),
                    raw_node("a", ["Person"], name="new"),
                ],
                "relationships": [],
            }
        )
        assert [n.id for n in graph.nodes] == ["a", "b"]
        assert graph.get_node("a").caption == "new"

    def test_duplicate_relationships_collapse(self) -> None:
        """Test relationships are deduplicated by id."""
        graph = normalize_response(
            {
                "nodes": [raw_node("a", ["P"]), raw_node("b", ["P"])],
                "relationships": [raw_rel("r", "KNOWS", "a", "b")] * 3,
            }
        )
        assert len(graph.relationships) == 1

    def test_ids_unique(self, mixed_response) -> None:
        """Test no two canonical nodes share an id."""
        doubled = {
            "nodes": mixed_response["nodes"] * 2,
            "relationships": mixed_response["relationships"] * 2,
        }
        graph = normalize_response(doubled)
        ids = [n.id for n in graph.nodes]
        assert len(ids) == len(set(ids))

    def test_idempotent(self, mixed_response) -> None:
        """Test normalizing the same input twice gives the same graph."""
        assert normalize_response(mixed_response) == normalize_response(mixed_response)

    def test_every_relationship_resolves(self, mixed_response) -> None:
        """Test both endpoints of every relationship are in the node set."""
        mixed_response["relationships"].append(raw_rel("bad", "X", "e1", "nowhere"))
        graph = normalize_response(mixed_response)
        for rel in graph.relationships:
            assert rel.from_id in graph.node_ids
            assert rel.to_id in graph.node_ids
        assert graph.get_relationship("bad") is None

    def test_colors(self, mixed_response) -> None:
        """Test nodes take the color of their first label."""
        graph = normalize_response(mixed_response)
        person = graph.get_node("e1")
        assert person.color == graph.scheme["Person"]
        assert "__Entity__" in graph.scheme

    def test_relationship_display_fields(self, mixed_response) -> None:
        """Test relationship caption, captions and color."""
        graph = normalize_response(mixed_response)
        rel = graph.get_relationship("r5")
        assert rel.caption == "WORKS_FOR"
        assert rel.captions == {"since": 2019}
        assert rel.color in DEFAULT_PALETTE
        assert "WORKS_FOR" not in graph.scheme

    def test_relationship_colors_follow_labels(self, mixed_response) -> None:
        """Test relationship types take the next colors after the six labels."""
        graph = normalize_response(mixed_response)
        assert len(graph.scheme) == 6
        assert graph.get_relationship("r1").color == DEFAULT_PALETTE[6]
        assert graph.get_relationship("r2").color == DEFAULT_PALETTE[6]
        assert graph.get_relationship("r3").color == DEFAULT_PALETTE[7]

    def test_relationship_color_distinct_from_labels(self) -> None:
        """Test the first relationship type does not reuse a label color."""
        graph = normalize_response(
            {
                "nodes": [raw_node("d", ["Document"]), raw_node("c", ["Chunk"])],
                "relationships": [raw_rel("r", "HAS_CHUNK", "d", "c")],
            }
        )
        rel_color = graph.get_relationship("r").color
        assert rel_color == DEFAULT_PALETTE[2]
        assert rel_color not in graph.scheme.values()
        assert list(graph.scheme) == ["Document", "Chunk"]

    def test_node_size_from_config(self) -> None:
        """Test nodes get the configured display weight."""
        config = GraphViewConfig(node_size=35)
        graph = normalize_response(
            {"nodes": [raw_node("a", ["P"])], "relationships": []}, config
        )
        assert graph.get_node("a").size == 35
        assert graph.get_node("a").selected is False

    def test_empty_input_is_valid(self) -> None:
        """Test zero nodes is an empty graph, not an error."""
        graph = GraphNormalizer().normalize([], [])
        assert graph.is_empty
        assert graph.scheme == {}

    def test_unlabeled_node(self) -> None:
        """Test a node without labels degrades gracefully."""
        graph = normalize_response({"nodes": [{"elementId": "x"}], "relationships": []})
        node = graph.get_node("x")
        assert node.labels == ()
        assert node.caption == ""
        assert node.color == ""


class TestDedupeNodes:
    """Tests for the node deduplication helper."""

    def test_position_of_first_sighting(self) -> None:
        """Test order follows the first sighting of each id."""
        nodes = [
            RawNode(element_id="b"),
            RawNode(element_id="a"),
            RawNode(element_id="b", labels=["Later"]),
        ]
        result = dedupe_nodes(nodes)
        assert [n.element_id for n in result] == ["b", "a"]
        assert result[0].labels == ["Later"]
