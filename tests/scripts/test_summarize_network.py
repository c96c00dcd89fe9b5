"""Tests for the network summary CLI."""

from __future__ import annotations

import json
from pathlib import Path
from textwrap import dedent

import pytest

from scripts.summarize_network import main


@pytest.fixture()
def edge_file(tmp_path: Path) -> Path:
    """Create a small edge list with two dense groups."""

    content = dedent(
        """
        Source1,Source2,Weight
        tue_01_a1.jpg,tue_02_a2.jpg,1
        tue_02_a2.jpg,tue_03_a3.jpg,1
        tue_03_a3.jpg,tue_01_a1.jpg,1
        wed_01_b1.jpg,wed_02_b2.jpg,2
        wed_02_b2.jpg,wed_03_b3.jpg,2
        wed_03_b3.jpg,wed_01_b1.jpg,2
        tue_03_a3.jpg,wed_01_b1.jpg,0.1
        """
    ).strip()
    path = tmp_path / "edges.csv"
    path.write_text(content, encoding="utf-8")
    return path


def test_report_lists_clusters(edge_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(edge_file)]) == 0
    report = capsys.readouterr().out
    assert "Nodes: 6" in report
    assert "Edges: 7" in report
    assert "Clusters: 2" in report
    assert "Cluster 1 (#03c75a, 3 members)" in report
    assert "Cluster 2 (#ff6b6b, 3 members)" in report
    assert "      * b2" in report


def test_report_includes_resolved_tags(edge_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    tags = tmp_path / "tags.csv"
    tags.write_text('title,tags\nb2,"#판타지, #액션"\n', encoding="utf-8")
    assert main([str(edge_file), "--tags", str(tags)]) == 0
    report = capsys.readouterr().out
    assert "      * b2 #판타지 #액션" in report


def test_report_without_clustering(edge_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(edge_file), "--no-clustering"]) == 0
    report = capsys.readouterr().out
    assert "Clustering disabled." in report
    assert "Clusters:" not in report


def test_json_output(edge_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(edge_file), "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert len(payload["nodes"]) == 6
    assert len(payload["clusters"]) == 2
    assert "x" in payload["nodes"][0]


def test_missing_edge_file_fails(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(tmp_path / "missing.csv")]) == 1
    assert "Network summary failed" in capsys.readouterr().err
