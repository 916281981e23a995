import pytest
from unittest.mock import MagicMock

from infrastructure.api.api_client import ApiClient
from infrastructure.api.procurement_api import ProcurementApi
from infrastructure.storage.session_store import InMemorySessionStore
from use_cases.domain_models import Page, Pagination


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def api(client):
    return ProcurementApi(client)


def test_list_prs_drops_empty_filters_and_reads_pagination(api, client):
    client.get.return_value = {
        "success": True,
        "data": [{"id": "pr-1"}, {"id": "pr-2"}],
        "pagination": {"page": 2, "limit": 10, "total": 12, "totalPages": 2},
    }

    page = api.list_prs(status="Approved", search="", projectId=None, page=2)

    client.get.assert_called_once_with("/prs", params={"status": "Approved", "page": "2"})
    assert isinstance(page, Page)
    assert [pr["id"] for pr in page.data] == ["pr-1", "pr-2"]
    assert page.pagination == Pagination(page=2, limit=10, total=12, total_pages=2)


def test_list_without_array_payload_is_empty(api, client):
    client.get.return_value = {"success": True, "data": None}

    page = api.list_suppliers()

    assert page.data == []
    assert page.pagination is None


def test_pr_workflow_actions(api, client):
    client.post.return_value = {"success": True, "data": {"status": "Approved"}}

    assert api.approve_pr("pr-1", "looks good") == {"status": "Approved"}
    client.post.assert_called_with("/prs/pr-1/approve", {"comments": "looks good"})

    api.approve_pr("pr-1")
    client.post.assert_called_with("/prs/pr-1/approve", {})

    api.reject_pr("pr-1", "over budget")
    client.post.assert_called_with("/prs/pr-1/reject", {"comments": "over budget"})

    api.send_to_suppliers("pr-1")
    client.post.assert_called_with("/prs/pr-1/send-to-suppliers", None)

    api.award_pr("pr-1", "sup-9", "q-3")
    client.post.assert_called_with("/prs/pr-1/award", {"supplierId": "sup-9", "quotationId": "q-3"})


def test_compare_quotations(api, client):
    client.get.return_value = {"success": True, "data": {"quotations": []}}
    assert api.compare_quotations("pr-1") == {"quotations": []}
    client.get.assert_called_once_with("/prs/pr-1/quotations/compare")


def test_create_project_omits_optional_fields(api, client):
    client.post.return_value = {"success": True, "data": {"id": "p1"}}

    api.create_project("PO-1", "PN-1", "TN-1", 1500.0, "2024-09-30")

    client.post.assert_called_once_with("/projects", {
        "customerPO": "PO-1",
        "partNumber": "PN-1",
        "toolNumber": "TN-1",
        "price": 1500.0,
        "targetDate": "2024-09-30",
    })


def test_create_pr_body(api, client):
    client.post.return_value = {"success": True, "data": {"id": "pr-1"}}
    items = [{"name": "Punch", "specification": "D2", "quantity": 2}]

    api.create_pr("p1", "NewSet", items, supplier_ids=("s1", "s2"))

    client.post.assert_called_once_with("/prs", {
        "projectId": "p1",
        "prType": "NewSet",
        "items": items,
        "supplierIds": ["s1", "s2"],
    })


def test_create_supplier_requires_code_and_name(api, client):
    with pytest.raises(ValueError):
        api.create_supplier({"name": "Acme"})
    client.post.assert_not_called()


def test_adjust_inventory_validates_type(api, client):
    with pytest.raises(ValueError):
        api.adjust_inventory("inv-1", 5, "Theft")
    client.post.assert_not_called()

    client.post.return_value = {"success": True, "data": {"quantity": 15}}
    assert api.adjust_inventory("inv-1", 5, "Addition", notes="restock") == {"quantity": 15}
    client.post.assert_called_once_with("/inventory/inv-1/adjust", {"quantity": 5, "type": "Addition", "notes": "restock"})


def test_low_stock_items(api, client):
    client.get.return_value = {"success": True, "data": [{"id": "inv-1"}]}
    assert api.low_stock_items() == [{"id": "inv-1"}]

    client.get.return_value = {"success": True, "data": {}}
    assert api.low_stock_items() == []


def test_handover_and_spares_request_actions(api, client):
    client.post.return_value = {"success": True, "data": {}}

    api.reject_handover("h1", "damaged insert")
    client.post.assert_called_with("/handovers/h1/reject", {"remarks": "damaged insert"})

    api.fulfill_spares_request("r1", 3)
    client.post.assert_called_with("/requests/r1/fulfill", {"quantityFulfilled": 3})

    api.reject_spares_request("r1", "out of stock")
    client.post.assert_called_with("/requests/r1/reject", {"rejectionReason": "out of stock"})


def test_facade_over_real_client_builds_query_string():
    http = MagicMock()
    resp = MagicMock()
    resp.status_code = 200
    resp.content = b"{}"
    resp.json.return_value = {"success": True, "data": [], "pagination": {"page": 1, "limit": 20, "total": 0, "totalPages": 0}}
    http.request.return_value = resp
    client = ApiClient(base_url="http://api.test/api", store=InMemorySessionStore({"accessToken": "t"}), http=http, timeout=5)

    page = ProcurementApi(client).list_inventory(status="Low", limit=20)

    call = http.request.call_args
    assert call.args == ("GET", "http://api.test/api/inventory")
    assert call.kwargs["params"] == {"status": "Low", "limit": "20"}
    assert call.kwargs["data"] is None
    assert page.pagination.limit == 20
