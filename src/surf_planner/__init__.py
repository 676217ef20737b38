"""Surf session window recommendations.

Scores hourly marine forecasts against per-break surf preferences and a weekly
availability calendar, and ranks the resulting candidate session windows.
"""

__version__ = "0.1.0"
