"""
Local insight engine for the habit journal.

Turns energy/stress journal entries into behavioral patterns, correlation
findings and charted aggregates using keyword rules and statistics only.
"""
__version__ = "1.0.0"
