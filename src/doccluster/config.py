"""Configuration management for doccluster."""

import copy
import os
from pathlib import Path
from typing import Any

import yaml


DEFAULT_CONFIG = {
    "storage_backend": "chromadb",
    "chroma_path": "~/.doccluster/chroma",
    "json_path": "~/.doccluster/corpus.json",
    "embedding_model": "intfloat/e5-large-v2",
    "claude_model": "claude-sonnet-4-20250514",
    "clustering": {
        "min_cluster_size": 2,
        "max_clusters": 10,
        "similarity_threshold": 0.7,
        "strategy": "first",
        "max_documents": None,
    },
    "similarity": {"limit": 5, "threshold": 0.7},
    "topics": {"max_topics": 10},
    "labeling": {
        "enabled": True,
        "max_summary_chars": 200,
        "max_tokens": 500,
        "temperature": 0.3,
        "timeout": 30.0,
        "max_retries": 2,
    },
}


def _find_config_file() -> Path | None:
    """Look for config.yaml in standard locations."""
    candidates = [
        Path.cwd() / "config" / "config.yaml",
        Path.cwd() / "config.yaml",
        Path.home() / ".doccluster" / "config.yaml",
    ]
    for p in candidates:
        if p.exists():
            return p
    return None


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration, merging defaults with file and env vars."""
    cfg = copy.deepcopy(DEFAULT_CONFIG)

    path = Path(config_path) if config_path else _find_config_file()
    if path and path.exists():
        with open(path) as f:
            file_cfg = yaml.safe_load(f) or {}
        _deep_merge(cfg, file_cfg)

    # Env overrides
    if api_key := os.environ.get("ANTHROPIC_API_KEY"):
        cfg["claude_api_key"] = api_key
    if backend := os.environ.get("DOCCLUSTER_STORAGE_BACKEND"):
        cfg["storage_backend"] = backend

    # Expand paths
    for key in ("chroma_path", "json_path"):
        cfg[key] = str(Path(cfg[key]).expanduser().resolve())

    return cfg


def _deep_merge(base: dict, override: dict) -> None:
    """Merge override into base in-place."""
    for k, v in override.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
