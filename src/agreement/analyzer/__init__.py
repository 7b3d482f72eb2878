"""Analyzer subpackage exports."""

from .array import ArrayAnalyzer
from .base import BaseAnalyzer
from .dataframe import DataFrameAnalyzer

__all__ = ["ArrayAnalyzer", "BaseAnalyzer", "DataFrameAnalyzer"]
