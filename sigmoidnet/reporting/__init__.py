"""Reporting utilities for sigmoidnet."""

from .artifacts import describe_network, write_manifest
from .logger import LoggingCallback, get_logger
from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter
from .summary import summarize, write_summary

__all__ = [
    "CsvSink",
    "JsonlSink",
    "LoggingCallback",
    "PlotAdapter",
    "describe_network",
    "get_logger",
    "summarize",
    "write_manifest",
    "write_summary",
]
