"""
Agents Module
Entry points of the progress engine.

Available Agents:
- Progress: Records study sessions (streaks, topics, weekly buckets)
- Analytics: Period analytics, dashboard counters, topic lookups
"""

# Base class
from study_progress.agents.base_agent import BaseAgent

# Agents
from study_progress.agents.progress_agent import ProgressAgent, progress_agent
from study_progress.agents.analytics_agent import AnalyticsAgent, analytics_agent

__all__ = [
    "BaseAgent",
    "ProgressAgent", "progress_agent",
    "AnalyticsAgent", "analytics_agent"
]
