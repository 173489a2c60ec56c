"""
Analytics Agent
Serves read views over a user's progress record.

Never creates or modifies records: a user without history gets an
all-zero view rather than an error.
"""
from study_progress.agents.base_agent import BaseAgent
from study_progress.config import Settings
from study_progress.core.clock import Clock
from study_progress.core.exceptions import NotFoundError
from study_progress.models.progress import TopicProgress
from study_progress.schemas.progress import AnalyticsPeriod, AnalyticsView, DashboardSummary
from study_progress.services.cosmos_db_service import CosmosDBService
from study_progress.utils.analytics import AnalyticsProjector, resolve_period


class AnalyticsAgent(BaseAgent):
    """Analytics Agent for period views, dashboard counters and topic lookups."""

    def __init__(
        self,
        settings: Settings | None = None,
        db_service: CosmosDBService | None = None,
        clock: Clock | None = None,
        projector: AnalyticsProjector | None = None
    ):
        super().__init__(settings=settings, db_service=db_service, clock=clock)
        self.projector = projector or AnalyticsProjector(self.settings)

    @property
    def name(self) -> str:
        return "analytics"

    @property
    def description(self) -> str:
        return "Builds period analytics, top topics and dashboard metrics from progress"

    async def get_analytics(
        self,
        user_id: str,
        period: str | AnalyticsPeriod | None = AnalyticsPeriod.WEEK
    ) -> AnalyticsView:
        """
        Analytics for the last week, month or year.

        Raises:
            ValidationError: Unknown period
        """
        period = resolve_period(period)
        self.log_start({"user_id": user_id, "period": period.value})

        record = await self.load_progress(user_id)
        view = self.projector.project(record, period, self.clock())
        view.total_stats.total_flashcards_created = await self.count_flashcards(user_id)

        self.log_complete({"sessions_in_period": view.period_stats.total_sessions})
        return view

    async def get_dashboard_summary(self, user_id: str) -> DashboardSummary:
        """Session count, cards created, quiz score and streak."""
        self.log_debug("Getting dashboard summary", {"user_id": user_id})
        record = await self.load_progress(user_id)
        cards_created = await self.count_flashcards(user_id)
        return self.projector.dashboard(record, cards_created)

    async def get_topic_progress(self, user_id: str, topic: str) -> TopicProgress:
        """
        Progress for one topic.

        Raises:
            NotFoundError: The user has no record or never studied the topic
        """
        record = await self.load_progress(user_id)
        if record is None:
            raise NotFoundError("No progress recorded for user", details={"user_id": user_id})

        topic_progress = record.find_topic(topic)
        if topic_progress is None:
            raise NotFoundError(
                "Topic not studied",
                details={"user_id": user_id, "topic": topic}
            )
        return topic_progress


# Singleton instance
analytics_agent = AnalyticsAgent()
