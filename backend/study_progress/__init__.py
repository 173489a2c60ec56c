"""
Study progress engine.
Aggregates study sessions into per-user progress records and serves analytics over them.
"""
from study_progress.config import settings
from study_progress.core.logging_config import setup_logging

__version__ = "0.1.0"

# Configure logging
setup_logging(settings)
