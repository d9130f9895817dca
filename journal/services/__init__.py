"""
Services package for the insight engine.

Orchestration layer:
- insight_service: One analysis run over an entry store (cached stages)
- export_service: Aggregate series export (rows, DataFrame, CSV, JSON)
"""

# Explicit imports for convenience
from .insight_service import InsightService, InsightReport
from .export_service import ExportService
