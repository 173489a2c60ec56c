"""
Tests for the Analytics Agent.
"""
import pytest

from study_progress.agents.analytics_agent import AnalyticsAgent
from study_progress.agents.progress_agent import ProgressAgent
from study_progress.core.exceptions import NotFoundError, ValidationError
from study_progress.schemas.progress import AnalyticsPeriod


@pytest.fixture
def progress_agent(test_settings, mock_cosmos_service, clock):
    return ProgressAgent(settings=test_settings, db_service=mock_cosmos_service, clock=clock)


@pytest.fixture
def analytics_agent(test_settings, mock_cosmos_service, clock):
    return AnalyticsAgent(settings=test_settings, db_service=mock_cosmos_service, clock=clock)


class TestGetAnalytics:
    """Tests for AnalyticsAgent.get_analytics"""

    @pytest.mark.asyncio
    async def test_user_without_history(self, analytics_agent, mock_cosmos_service, progress_store):
        view = await analytics_agent.get_analytics("nobody", "month")

        assert view.period == AnalyticsPeriod.MONTH
        assert view.recent_activity == []
        assert view.total_stats.total_flashcards_created == 0
        mock_cosmos_service.create_progress.assert_not_called()
        assert progress_store == {}

    @pytest.mark.asyncio
    async def test_period_filters_sessions(self, progress_agent, analytics_agent, clock):
        await progress_agent.record_session("u1", "quiz", {"percentage": 50, "topic": "math"}, 10)
        clock.advance(days=10)
        await progress_agent.record_session("u1", "quiz", {"percentage": 90, "topic": "math"}, 5)
        await progress_agent.record_session("u1", "flashcard", {"isLearned": True, "topic": "art"}, 2)

        week = await analytics_agent.get_analytics("u1", "week")
        month = await analytics_agent.get_analytics("u1", "month")

        assert week.period_stats.total_sessions == 2
        assert week.period_stats.average_score == 90
        assert month.period_stats.total_sessions == 3
        assert month.period_stats.average_score == 70
        assert week.total_stats.total_quizzes_taken == 2
        assert [t.topic for t in week.top_topics] == ["math", "art"]

    @pytest.mark.asyncio
    async def test_default_period_is_week(self, analytics_agent):
        view = await analytics_agent.get_analytics("u1")

        assert view.period == AnalyticsPeriod.WEEK

    @pytest.mark.asyncio
    async def test_flashcard_count_in_total_stats(self, progress_agent, analytics_agent, mock_cosmos_service):
        await progress_agent.record_session("u1", "chat", {}, 1)
        mock_cosmos_service.count_flashcards_for_user.return_value = 12

        view = await analytics_agent.get_analytics("u1", "week")

        assert view.to_dict()["totalStats"]["totalFlashcardsCreated"] == 12

    @pytest.mark.asyncio
    async def test_invalid_period(self, analytics_agent, mock_cosmos_service):
        with pytest.raises(ValidationError):
            await analytics_agent.get_analytics("u1", "fortnight")

        mock_cosmos_service.get_progress.assert_not_called()

    @pytest.mark.asyncio
    async def test_does_not_write(self, progress_agent, analytics_agent, mock_cosmos_service, progress_store):
        await progress_agent.record_session("u1", "chat", {}, 1)
        before = dict(progress_store["u1"])
        mock_cosmos_service.replace_progress.reset_mock()

        await analytics_agent.get_analytics("u1", "year")
        await analytics_agent.get_dashboard_summary("u1")

        mock_cosmos_service.replace_progress.assert_not_called()
        assert progress_store["u1"] == before


class TestGetDashboardSummary:
    """Tests for AnalyticsAgent.get_dashboard_summary"""

    @pytest.mark.asyncio
    async def test_summary(self, progress_agent, analytics_agent, mock_cosmos_service, clock):
        await progress_agent.record_session("u1", "quiz", {"score": 7, "percentage": 70}, 5)
        clock.advance(days=1)
        await progress_agent.record_session("u1", "quiz", {"score": 8, "percentage": 80}, 5)
        mock_cosmos_service.count_flashcards_for_user.return_value = 3

        summary = await analytics_agent.get_dashboard_summary("u1")

        assert summary.study_sessions == 2
        assert summary.quiz_score == 8
        assert summary.study_streak == 2
        assert summary.cards_created == 3
        assert summary.to_dict() == {
            "studySessions": 2,
            "cardsCreated": 3,
            "quizScore": 8,
            "studyStreak": 2
        }

    @pytest.mark.asyncio
    async def test_summary_without_record(self, analytics_agent):
        summary = await analytics_agent.get_dashboard_summary("nobody")

        assert summary.study_sessions == 0
        assert summary.quiz_score == 0


class TestGetTopicProgress:
    """Tests for AnalyticsAgent.get_topic_progress"""

    @pytest.mark.asyncio
    async def test_known_topic(self, progress_agent, analytics_agent):
        await progress_agent.record_session("u1", "quiz", {"percentage": 60, "topic": "math"}, 5)

        topic = await analytics_agent.get_topic_progress("u1", "math")

        assert topic.quizzes_count == 1
        assert topic.average_score == 60

    @pytest.mark.asyncio
    async def test_unknown_topic(self, progress_agent, analytics_agent):
        await progress_agent.record_session("u1", "quiz", {"percentage": 60, "topic": "math"}, 5)

        with pytest.raises(NotFoundError) as exc_info:
            await analytics_agent.get_topic_progress("u1", "Math")

        assert exc_info.value.details["topic"] == "Math"

    @pytest.mark.asyncio
    async def test_user_without_record(self, analytics_agent):
        with pytest.raises(NotFoundError):
            await analytics_agent.get_topic_progress("nobody", "math")
