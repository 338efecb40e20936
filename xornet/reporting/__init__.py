"""Reporting utilities for XorNet."""

from .console import ConsoleReporter
from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter
from .summary import write_summary

__all__ = ["ConsoleReporter", "CsvSink", "JsonlSink", "PlotAdapter", "write_summary"]
