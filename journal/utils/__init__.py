"""
Utilities package for the insight engine.

Common utility functions:
- time_utils: Date ranges and aggregate bucket calculations
- constants: Field names, thresholds and weights
- config: InsightContext construction from Django settings
- logging_utils: Structured logging with analysis correlation IDs
"""
