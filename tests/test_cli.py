"""Tests for the doccluster CLI against a JSON-file store."""

import json
import tempfile
from pathlib import Path

from click.testing import CliRunner

from doccluster.cli import cli

RECORDS = [
    {"chunk_id": "a0", "document_id": "a", "tenant_id": "acme", "embedding": [1.0, 0.1, 0.0],
     "document": {"title": "Lease Alpha", "type": "Contract", "key_points": ["Monthly rental payment due"]}},
    {"chunk_id": "b0", "document_id": "b", "tenant_id": "acme", "embedding": [1.0, 0.05, 0.0],
     "document": {"title": "Lease Beta", "type": "Contract"}},
    {"chunk_id": "c0", "document_id": "c", "tenant_id": "acme", "embedding": [0.0, 0.0, 1.0],
     "document": {"title": "Board Minutes", "type": None}},
]


def _setup(tmpdir: str, monkeypatch) -> tuple[Path, Path]:
    monkeypatch.delenv("DOCCLUSTER_STORAGE_BACKEND", raising=False)
    config_path = Path(tmpdir) / "config.yaml"
    config_path.write_text(f"storage_backend: json\njson_path: {Path(tmpdir) / 'corpus.json'}\n")
    records_path = Path(tmpdir) / "records.json"
    records_path.write_text(json.dumps(RECORDS))
    return config_path, records_path


def _run(config_path, *args):
    return CliRunner().invoke(cli, ["-c", str(config_path), *args])


def test_load_cluster_similar_topics(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path, records_path = _setup(tmpdir, monkeypatch)

        result = _run(config_path, "load", str(records_path))
        assert result.exit_code == 0, result.output
        assert "Loaded 3 chunk(s) for 3 document(s)" in result.output

        result = _run(config_path, "cluster", "acme", "--no-labels", "--save")
        assert result.exit_code == 0, result.output
        assert "Collection 1" in result.output
        assert "1 document(s) unclustered" in result.output
        saved = json.loads((Path(tmpdir) / "corpus.json").read_text())["clusters"]["acme"]
        assert sorted(saved[0]["document_ids"]) == ["a", "b"]

        result = _run(config_path, "similar", "a", "--tenant", "acme")
        assert result.exit_code == 0, result.output
        assert "Lease Beta" in result.output
        assert "Board Minutes" not in result.output

        result = _run(config_path, "topics", "acme")
        assert result.exit_code == 0, result.output
        assert "Contract" in result.output
        assert "General" in result.output


def test_cluster_not_enough_data(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path, _ = _setup(tmpdir, monkeypatch)
        result = _run(config_path, "cluster", "nobody", "--no-labels")
        assert result.exit_code == 0
        assert "Not enough data yet" in result.output


def test_similar_unknown_document(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path, records_path = _setup(tmpdir, monkeypatch)
        _run(config_path, "load", str(records_path))
        result = _run(config_path, "similar", "missing", "--tenant", "acme")
        assert result.exit_code == 1
        assert "no embedded chunk" in result.output
