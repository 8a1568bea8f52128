"""Domain models for the timesheet payroll summary tool.

This package contains the domain model classes used throughout the application:
configuration, ingested rows, report descriptors and run results.
"""

from .config_models import MultiplierConfig, ReportConfig
from .report_variant import GroupBy, Layout, ReportRow, ReportVariant
from .row_data import SourceRow

__all__ = [
    # Configuration models
    "MultiplierConfig",
    "ReportConfig",
    # Report models
    "GroupBy",
    "Layout",
    "ReportRow",
    "ReportVariant",
    "SourceRow",
]
