"""
Behavioral Insights Package

Keyword-driven pattern extraction, correlation analysis and insight
formatting over journal entries.

No AI/ML - purely deterministic keyword rules and statistical thresholds.
"""
