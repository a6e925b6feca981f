from __future__ import annotations

import json

import pytest

from globemaker.io_topo import (
    DatasetNotFound,
    EmptyTopology,
    TopologyRepository,
    select_collection_name,
)

from .conftest import WORLD_ENTRIES, topology_document, write_topology


def test_select_collection_prefers_countries():
    assert select_collection_name({"land": {}, "countries": {}}) == "countries"


def test_select_collection_falls_back_to_first():
    assert select_collection_name({"land": {}, "rivers": {}}) == "land"


def test_select_collection_rejects_empty():
    with pytest.raises(EmptyTopology):
        select_collection_name({})


def test_load_features_in_dataset_order(world_topology):
    features = TopologyRepository(world_topology).load_features()

    assert [f.code for f in features] == [entry[0] for entry in WORLD_ENTRIES]
    assert [f.is_secondary_territory for f in features] == [bool(entry[1]) for entry in WORLD_ENTRIES]
    civ = features[0]
    assert civ.geometry.bounds == pytest.approx((-8.0, 5.0, -5.0, 8.0))


def test_load_features_reads_first_collection_without_countries_key(tmp_path):
    path = write_topology(
        tmp_path / "alt.json",
        topology_document(
            {
                "land": [("ETH", 0, 36.0, 4.0, 8.0)],
                "other": [("CIV", 0, -8.0, 5.0, 3.0), ("GHA", 0, -3.0, 5.0, 3.0)],
            }
        ),
    )
    repo = TopologyRepository(path)
    assert repo.collection_name() == "land"
    assert [f.code for f in repo.load_features()] == ["ETH"]


def test_load_features_prefers_countries_over_earlier_collection(tmp_path):
    path = write_topology(
        tmp_path / "multi.json",
        topology_document(
            {
                "land": [("ETH", 0, 36.0, 4.0, 8.0)],
                "countries": [("CIV", 0, -8.0, 5.0, 3.0)],
            }
        ),
    )
    assert [f.code for f in TopologyRepository(path).load_features()] == ["CIV"]


def test_missing_properties_are_not_load_errors(tmp_path):
    path = write_topology(
        tmp_path / "sparse.json",
        topology_document(
            {
                "countries": [
                    ("ETH", 0, 36.0, 4.0, 8.0),
                    (None, None, -8.0, 5.0, 3.0),
                ]
            }
        ),
    )
    features = TopologyRepository(path).load_features()

    assert len(features) == 2
    assert features[1].code is None
    assert features[1].is_secondary_territory is True
    assert features[0].is_main_territory


def test_missing_dataset_raises(tmp_path):
    with pytest.raises(DatasetNotFound, match="TopoJSON not found"):
        TopologyRepository(tmp_path / "absent.json").load_features()


@pytest.mark.parametrize(
    "document",
    [
        {"type": "Topology", "objects": {}, "arcs": []},
        {"type": "Topology", "arcs": []},
    ],
)
def test_empty_topology_raises(tmp_path, document):
    path = tmp_path / "empty.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    with pytest.raises(EmptyTopology):
        TopologyRepository(path).load_features()
