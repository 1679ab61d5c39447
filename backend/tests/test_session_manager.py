"""Unit tests for the session manager."""

from uuid import uuid4

import pytest

from managers.config.config_models import AppSettings, PageOverride, PagesConfig
from managers.session.session_manager import SessionManager
from modules.pages.definitions import PAGES


@pytest.fixture
def settings():
    return AppSettings(_env_file=None, API_BASE_URL="http://backend.test", SEARCH_DEBOUNCE_MS=0)


@pytest.fixture
def session_manager(settings, backend):
    pages_config = PagesConfig(pages={"history": PageOverride(page_size=25)})
    return SessionManager(settings, PAGES, pages_config=pages_config, transport=backend.transport)


class TestSessionManager:

    def test_create_and_get(self, session_manager):
        session = session_manager.create_session(token="abc", user_email="admin@x.ie")

        assert session_manager.get_session(session.id) is session
        assert session.auth_store.authenticated is True
        assert session.client.base_url == "http://backend.test"
        assert session_manager.get_session_count() == 1

    def test_unknown_session(self, session_manager):
        assert session_manager.get_session(uuid4()) is None
        assert session_manager.delete_session(uuid4()) is False

    def test_delete_clears_token(self, session_manager):
        session = session_manager.create_session(token="abc")

        assert session_manager.delete_session(session.id) is True

        assert session_manager.get_session(session.id) is None
        assert session.auth_store.get_token() is None

    def test_page_controllers_are_per_session(self, session_manager):
        first = session_manager.create_session(token="a")
        second = session_manager.create_session(token="b")

        page = session_manager.get_page(first, "rewards")

        assert session_manager.get_page(first, "rewards") is page
        assert session_manager.get_page(second, "rewards") is not page
        assert first.to_dict()["pages"] == ["rewards"]

    def test_unknown_page(self, session_manager):
        session = session_manager.create_session(token="a")
        assert session_manager.get_page(session, "dashboard") is None

    def test_overrides_applied(self, session_manager):
        session = session_manager.create_session(token="a")

        controller = session_manager.get_page(session, "history")

        assert session_manager.pages["history"].page_size == 25
        assert controller.query.state.page_size == 25
        assert controller.query.state.sort_by == "timestamp"
        assert PAGES["history"].page_size == 100

    @pytest.mark.asyncio
    async def test_session_page_fetches_with_session_token(self, session_manager, backend):
        backend.on("GET", "/getAllBusinesses", {"success": True, "data": []})
        session = session_manager.create_session(token="abc")

        await session_manager.get_page(session, "businesses").start()

        assert backend.requests[0].headers["Authorization"] == "Bearer abc"
