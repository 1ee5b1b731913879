"""Cluster labeling: generator interface, Claude backend, fallback policy."""

from .base import LabelGenerator, fallback_label, label_cluster
from .claude import ClaudeLabelGenerator, get_label_generator

__all__ = ["LabelGenerator", "ClaudeLabelGenerator", "fallback_label", "label_cluster", "get_label_generator"]
