"""Reporting utilities for Juggernaut."""

from .artifacts import write_manifest
from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter
from .summary import compute_auc, write_summary

__all__ = ["write_manifest", "CsvSink", "JsonlSink", "PlotAdapter", "compute_auc", "write_summary"]
