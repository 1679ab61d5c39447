"""Page controller tests against an in-memory backend."""

import asyncio

import httpx
import pytest

from modules.api_client.errors import UnauthenticatedError
from modules.api_client.http_client import BackendHTTPClient
from modules.listing.models import EmptyStateKind
from modules.listing.page_controller import ResourcePageController
from modules.pages.definitions import BUSINESSES, HISTORY, RECEIPTS, REDEEMS, REWARDS, USERS

DEBOUNCE = 0.01


def _controller(definition, client, notifier):
    return ResourcePageController(
        definition, definition.api_factory(client), notifier, debounce_seconds=DEBOUNCE, default_page_size=15,
    )


def _businesses(start, count):
    return [{"_id": f"b{i}", "name": f"Business {i}", "isActive": True} for i in range(start, start + count)]


def _paged_businesses(total):
    """Answers GET /getAllBusinesses from ``total`` records without reporting totalPages."""
    records = _businesses(0, total)

    def answer(request):
        page = int(request.url.params.get("page", 1))
        limit = int(request.url.params.get("limit", 15))
        chunk = records[(page - 1) * limit: page * limit]
        return httpx.Response(200, json={"success": True, "data": chunk, "total": total,
                                         "page": page, "limit": limit})

    return answer


class TestPagination:

    @pytest.mark.asyncio
    async def test_out_of_range_page_never_requested(self, backend, client, notifier):
        """42 rows at 15 per page: 3 pages, page 4 is refused without a request."""
        backend.on("GET", "/getAllBusinesses", _paged_businesses(42))
        controller = _controller(BUSINESSES, client, notifier)

        await controller.start()
        assert controller.coordinator.total_pages == 3
        assert len(controller.rows) == 15

        assert controller.set_page(4) is False
        await controller.wait_idle()
        assert len(backend.calls("GET", "/getAllBusinesses")) == 1

        assert controller.set_page(3) is True
        await controller.wait_idle()
        calls = backend.calls("GET", "/getAllBusinesses")
        assert len(calls) == 2
        assert calls[-1].url.params["page"] == "3"
        assert len(controller.rows) == 12

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, backend, client, notifier):
        backend.on("GET", "/getAllBusinesses", _paged_businesses(3))
        controller = _controller(BUSINESSES, client, notifier)

        await controller.start()
        await controller.start()

        assert len(backend.calls("GET", "/getAllBusinesses")) == 1

    @pytest.mark.asyncio
    async def test_history_defaults(self, backend, client, notifier):
        backend.on("GET", "/getAllUserHistory", {"success": True, "data": {"total": 0, "data": []}})
        controller = _controller(HISTORY, client, notifier)

        await controller.start()

        params = backend.requests[0].url.params
        assert params["limit"] == "100"
        assert params["sortBy"] == "timestamp"
        assert params["sortOrder"] == "desc"
        assert "actionType" not in params


class TestPageBounds:

    @pytest.mark.asyncio
    async def test_page_change_refused_while_search_result_pending(self, auth_store, notifier):
        """A search that commits while its fetch is slow accepts no page past 1 until it lands."""
        records = _businesses(0, 42)
        sent = []

        async def answer(request):
            search = request.url.params.get("search")
            page = int(request.url.params["page"])
            sent.append((search, page))
            matches = [r for r in records if not search or search in r["_id"]]
            if search:
                await asyncio.sleep(0.05)
            chunk = matches[(page - 1) * 15: page * 15]
            return httpx.Response(200, json={"success": True, "data": chunk, "total": len(matches)})

        slow_client = BackendHTTPClient("http://backend.test", auth_store=auth_store,
                                        transport=httpx.MockTransport(answer))
        controller = _controller(BUSINESSES, slow_client, notifier)
        await controller.start()
        assert controller.query.total_pages == 3

        controller.set_search_text("b1")
        await asyncio.sleep(DEBOUNCE * 3)
        accepted = controller.set_page(3)
        await controller.wait_idle()

        assert accepted is False
        assert sent == [(None, 1), ("b1", 1)]
        assert controller.query.state.page == 1
        assert len(controller.rows) == 11
        assert controller.empty_state() is None

    @pytest.mark.asyncio
    async def test_filter_change_resets_page_count(self, backend, client, notifier):
        backend.on("GET", "/uploaded-receipts", {"success": True, "data": {"total": 300, "data": []}})
        controller = _controller(RECEIPTS, client, notifier)
        await controller.start()
        assert controller.query.total_pages == 3

        controller.set_filter("case_1")

        assert controller.query.total_pages == 1
        assert controller.set_page(2) is False
        await controller.wait_idle()
        assert controller.query.total_pages == 3

    @pytest.mark.asyncio
    async def test_delete_last_row_on_last_page_moves_back(self, backend, client, notifier):
        records = _businesses(0, 31)

        def list_businesses(request):
            page = int(request.url.params["page"])
            chunk = records[(page - 1) * 15: page * 15]
            return httpx.Response(200, json={"success": True, "data": chunk, "total": len(records)})

        def delete_business(request):
            records.pop()
            return httpx.Response(200, json={"success": True})

        backend.on("GET", "/getAllBusinesses", list_businesses)
        backend.on("DELETE", "/deleteBusiness/b30", delete_business)
        controller = _controller(BUSINESSES, client, notifier)
        await controller.start()
        controller.set_page(3)
        await controller.wait_idle()
        assert [row.id for row in controller.rows] == ["b30"]

        controller.arm("b30")
        outcome = await controller.mutate("delete", "b30")
        await controller.wait_idle()

        assert outcome.success is True
        pages = [call.url.params["page"] for call in backend.calls("GET", "/getAllBusinesses")]
        assert pages == ["1", "3", "3", "2"]
        assert controller.query.state.page == 2
        assert controller.query.total_pages == 2
        assert len(controller.rows) == 15
        assert controller.empty_state() is None


class TestSearch:

    @pytest.mark.asyncio
    async def test_debounced_search_fetches_once_from_page_one(self, backend, client, notifier):
        backend.on("GET", "/getAllBusinesses", _paged_businesses(42))
        controller = _controller(BUSINESSES, client, notifier)
        await controller.start()
        controller.set_page(2)
        await controller.wait_idle()

        for raw in ("s", "st", "sta"):
            controller.set_search_text(raw)
        await asyncio.sleep(DEBOUNCE * 5)
        await controller.wait_idle()

        calls = backend.calls("GET", "/getAllBusinesses")
        assert len(calls) == 3
        assert calls[-1].url.params["search"] == "sta"
        assert calls[-1].url.params["page"] == "1"

    @pytest.mark.asyncio
    async def test_empty_search_differs_from_empty_page(self, backend, client, notifier):
        """No matches for a search reads differently than an empty table."""
        backend.on("GET", "/getAllBusinesses", {"success": True, "data": [], "total": 0})
        controller = _controller(BUSINESSES, client, notifier)
        await controller.start()
        unsearched = controller.empty_state()

        controller.set_search_text("nothing")
        controller.query.commit_search_now()
        await controller.wait_idle()
        searched = controller.empty_state()

        assert unsearched.kind is EmptyStateKind.NO_DATA
        assert searched.kind is EmptyStateKind.NO_RESULTS
        assert unsearched.message != searched.message
        assert searched.message == "Try adjusting your search criteria."

    @pytest.mark.asyncio
    async def test_receipts_filtered_empty_state(self, backend, client, notifier):
        backend.on("GET", "/uploaded-receipts", {"success": True, "data": {"total": 0, "data": []}})
        controller = _controller(RECEIPTS, client, notifier)
        await controller.start()

        controller.set_filter("case_0_25")
        await controller.wait_idle()

        assert backend.requests[-1].url.params["caseType"] == "case_0_25"
        empty = controller.empty_state()
        assert empty.kind is EmptyStateKind.FILTERED
        assert empty.message == "No receipts found for Case 0.25."


class TestMutations:

    @pytest.mark.asyncio
    async def test_redeem_status_flip(self, backend, client, notifier):
        """Marking a pending redemption delivered re-fetches and flips the offered action."""
        status = {"value": "pending"}

        def list_redeems(request):
            return httpx.Response(200, json={"success": True, "total": 1, "data": [{
                "_id": "d1", "status": status["value"],
                "reward": {"rewardName": "Pint", "business": {"_id": "b1", "name": "The Stag"}},
            }]})

        def update_status(request):
            status["value"] = backend.json_body(request)["status"]
            return httpx.Response(200, json={"success": True, "message": "Status updated"})

        backend.on("GET", "/geAllRedeems", list_redeems)
        backend.on("PUT", "/update-status", update_status)
        controller = _controller(REDEEMS, client, notifier)
        await controller.start()

        row = controller.rows[0]
        assert controller.row_actions(row) == ["mark_delivered"]
        assert [tab.tag for tab in controller.tabs] == ["all", "b1"]
        list_calls_before = len(backend.calls("GET", "/geAllRedeems"))

        outcome = await controller.mutate("mark_delivered", "d1")
        await controller.wait_idle()

        assert outcome.success is True
        assert backend.json_body(backend.calls("PUT", "/update-status")[0]) == {
            "redeemId": "d1", "status": "delivered",
        }
        assert len(backend.calls("GET", "/geAllRedeems")) == list_calls_before + 1
        assert controller.rows[0].status == "delivered"
        assert controller.row_actions(controller.rows[0]) == ["mark_pending"]
        assert controller.refresh_version == 1

    @pytest.mark.asyncio
    async def test_cancelled_delete_never_sent(self, backend, client, notifier):
        backend.on("GET", "/getAllRewards", {"success": True, "data": []})
        backend.on("DELETE", "/deleteReward/r1", {"success": True})
        controller = _controller(REWARDS, client, notifier)
        await controller.start()

        controller.arm("r1")
        assert controller.view()["pending_confirmation"] == "r1"
        controller.cancel()
        outcome = await controller.mutate("delete", "r1")

        assert outcome.success is False
        assert backend.calls("DELETE", "/deleteReward/r1") == []

    @pytest.mark.asyncio
    async def test_update_keeps_page_and_fetches_once(self, backend, client, notifier):
        backend.on("GET", "/getAllBusinesses", _paged_businesses(42))
        backend.on("PATCH", "/updateBusiness/b20", {"success": True, "message": "Business updated"})
        controller = _controller(BUSINESSES, client, notifier)
        await controller.start()
        controller.set_page(2)
        await controller.wait_idle()
        controller.open_editor("edit", "b20")
        before = len(backend.calls("GET", "/getAllBusinesses"))

        outcome = await controller.mutate("update", "b20", {
            "name": "Renamed", "method": "qr", "earnPoints": {"type": "per_visit", "value": 5},
        })
        await controller.wait_idle()

        assert outcome.success is True
        calls = backend.calls("GET", "/getAllBusinesses")
        assert len(calls) == before + 1
        assert calls[-1].url.params["page"] == "2"
        assert controller.editor is None

    @pytest.mark.asyncio
    async def test_create_jumps_to_first_page(self, backend, client, notifier):
        backend.on("GET", "/getAllBusinesses", _paged_businesses(42))
        backend.on("POST", "/createBusiness", {"success": True})
        controller = _controller(BUSINESSES, client, notifier)
        await controller.start()
        controller.set_page(3)
        await controller.wait_idle()
        before = len(backend.calls("GET", "/getAllBusinesses"))

        await controller.mutate("create", payload={
            "name": "New Bar", "method": "qr", "earnPoints": {"type": "per_visit", "value": 5},
        })
        await controller.wait_idle()

        calls = backend.calls("GET", "/getAllBusinesses")
        assert len(calls) == before + 1
        assert calls[-1].url.params["page"] == "1"
        assert controller.query.state.page == 1

    @pytest.mark.asyncio
    async def test_invalid_payload_sends_nothing(self, backend, client, notifier):
        backend.on("GET", "/getAllBusinesses", _paged_businesses(3))
        controller = _controller(BUSINESSES, client, notifier)
        await controller.start()
        before = len(backend.requests)

        outcome = await controller.mutate("create", payload={"name": ""})
        await controller.wait_idle()

        assert outcome.success is False
        assert outcome.message == "Business name is required."
        assert len(backend.requests) == before

    @pytest.mark.asyncio
    async def test_failed_mutation_does_not_refetch(self, backend, client, notifier):
        backend.on("GET", "/getAllBusinesses", _paged_businesses(3))
        backend.on("DELETE", "/deleteBusiness/b1", {"success": False, "message": "Business has rewards"},
                   status=400)
        controller = _controller(BUSINESSES, client, notifier)
        await controller.start()
        controller.arm("b1")
        before = len(backend.calls("GET", "/getAllBusinesses"))

        outcome = await controller.mutate("delete", "b1")
        await controller.wait_idle()

        assert outcome.message == "Business has rewards"
        assert len(backend.calls("GET", "/getAllBusinesses")) == before
        assert controller.view()["pending_confirmation"] == "b1"
        assert controller.refresh_version == 0


class TestUsersPage:

    @pytest.mark.asyncio
    async def test_requests_tab_uses_pending_endpoint(self, backend, client, notifier):
        backend.on("GET", "/getAllUsers", {"success": True, "data": [
            {"_id": "u1", "firstName": "Ada", "role": "consumer", "status": "active"},
        ]})
        backend.on("GET", "/pendingBusinessRequests", {"success": True, "data": [
            {"_id": "u2", "businessInfo": {"ownerName": "Sean", "businessName": "Sean's"}},
        ]})
        controller = _controller(USERS, client, notifier)
        await controller.start()

        assert backend.requests[0].url.params["role"] == "consumer"
        assert controller.row_actions(controller.rows[0]) == ["block", "delete"]

        controller.set_filter("requests")
        await controller.wait_idle()

        pending_calls = backend.calls("GET", "/pendingBusinessRequests")
        assert len(pending_calls) == 1
        assert "role" not in pending_calls[0].url.params
        assert controller.rows[0].first_name == "Sean"
        assert controller.row_actions(controller.rows[0]) == ["approve_business", "reject_business"]


class TestErrors:

    @pytest.mark.asyncio
    async def test_first_load_failure_shows_error_state(self, backend, client, notifier):
        backend.on("GET", "/getAllBusinesses", lambda request: httpx.Response(503, text="down"))
        controller = _controller(BUSINESSES, client, notifier)

        await controller.start()

        empty = controller.empty_state()
        assert empty.kind is EmptyStateKind.ERROR
        view = controller.view()
        assert view["rows"] == []
        assert view["empty_state"]["kind"] == "error"

    @pytest.mark.asyncio
    async def test_unauthenticated_reaches_caller(self, backend, client, notifier):
        backend.on("GET", "/getAllBusinesses", {"success": False, "message": "Token expired"}, status=401)
        controller = _controller(BUSINESSES, client, notifier)

        with pytest.raises(UnauthenticatedError):
            await controller.start()
        assert notifier.drain() == []
