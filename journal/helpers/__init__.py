"""
Helpers package for the insight engine.

Helper functions for specific concerns:
- nlp_helpers: Keyword categorization and text polarity
- metric_helpers: Null-safe averages and correlation
- cache_helpers: InsightCache memoization
- monitoring: Timing and metrics collection
"""
