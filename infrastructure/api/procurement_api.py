from typing import Any, Dict, Iterable, List, Mapping, Optional

from infrastructure.api.api_client import ApiClient
from use_cases.domain_models import Page, Pagination

ADJUSTMENT_TYPES = ("Addition", "Removal", "Adjustment")


def _clean_filters(filters: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    if not filters:
        return {}
    return {k: str(v) for k, v in filters.items() if v is not None and v != ""}


def _drop_none(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


class ProcurementApi:
    """Resource endpoints of the procurement backend, on top of ``ApiClient``."""

    def __init__(self, client: ApiClient):
        self.client = client

    def _list(self, resource: str, filters: Optional[Mapping[str, Any]] = None) -> Page:
        response = self.client.get(f"/{resource}", params=_clean_filters(filters))
        data = response.get("data")
        return Page(
            data=data if isinstance(data, list) else [],
            pagination=Pagination.from_dict(response.get("pagination")),
        )

    def _get(self, endpoint: str) -> Any:
        return self.client.get(endpoint).get("data")

    def _post(self, endpoint: str, body: Any = None) -> Any:
        return self.client.post(endpoint, body).get("data")

    def _put(self, endpoint: str, body: Any) -> Any:
        return self.client.put(endpoint, body).get("data")

    # --- projects ---

    def list_projects(self, **filters) -> Page:
        return self._list("projects", filters)

    def get_project(self, project_id: str) -> Any:
        return self._get(f"/projects/{project_id}")

    def create_project(self, customer_po: str, part_number: str, tool_number: str, price: float,
                       target_date: str, status: Optional[str] = None, description: Optional[str] = None) -> Any:
        body = {
            "customerPO": customer_po,
            "partNumber": part_number,
            "toolNumber": tool_number,
            "price": price,
            "targetDate": target_date,
        }
        # Backend defaults status to Active when omitted.
        if status:
            body["status"] = status
        if description:
            body["description"] = description
        return self._post("/projects", body)

    def update_project(self, project_id: str, changes: Mapping[str, Any]) -> Any:
        return self._put(f"/projects/{project_id}", _drop_none(changes))

    def delete_project(self, project_id: str) -> None:
        self.client.delete(f"/projects/{project_id}")

    # --- purchase requisitions ---

    def list_prs(self, **filters) -> Page:
        return self._list("prs", filters)

    def get_pr(self, pr_id: str) -> Any:
        return self._get(f"/prs/{pr_id}")

    def create_pr(self, project_id: str, pr_type: str, items: List[Mapping[str, Any]],
                  supplier_ids: Optional[Iterable[str]] = None, mod_ref_reason: Optional[str] = None,
                  critical_spares: Optional[List[Mapping[str, Any]]] = None) -> Any:
        body = _drop_none({
            "projectId": project_id,
            "prType": pr_type,
            "modRefReason": mod_ref_reason,
            "items": list(items),
            "supplierIds": list(supplier_ids) if supplier_ids is not None else None,
            "criticalSpares": critical_spares,
        })
        return self._post("/prs", body)

    def update_pr(self, pr_id: str, changes: Mapping[str, Any]) -> Any:
        return self._put(f"/prs/{pr_id}", _drop_none(changes))

    def delete_pr(self, pr_id: str) -> None:
        self.client.delete(f"/prs/{pr_id}")

    def approve_pr(self, pr_id: str, comments: Optional[str] = None) -> Any:
        return self._post(f"/prs/{pr_id}/approve", _drop_none({"comments": comments}))

    def reject_pr(self, pr_id: str, comments: str) -> Any:
        return self._post(f"/prs/{pr_id}/reject", {"comments": comments})

    def send_to_suppliers(self, pr_id: str) -> Any:
        return self._post(f"/prs/{pr_id}/send-to-suppliers")

    def award_pr(self, pr_id: str, supplier_id: str, quotation_id: str) -> Any:
        return self._post(f"/prs/{pr_id}/award", {"supplierId": supplier_id, "quotationId": quotation_id})

    def compare_quotations(self, pr_id: str) -> Any:
        return self._get(f"/prs/{pr_id}/quotations/compare")

    # --- suppliers ---

    def list_suppliers(self, **filters) -> Page:
        return self._list("suppliers", filters)

    def get_supplier(self, supplier_id: str) -> Any:
        return self._get(f"/suppliers/{supplier_id}")

    def create_supplier(self, supplier: Mapping[str, Any]) -> Any:
        if not supplier.get("supplierCode") or not supplier.get("name"):
            raise ValueError("supplierCode and name are required")
        return self._post("/suppliers", _drop_none(supplier))

    def update_supplier(self, supplier_id: str, changes: Mapping[str, Any]) -> Any:
        return self._put(f"/suppliers/{supplier_id}", _drop_none(changes))

    def delete_supplier(self, supplier_id: str) -> None:
        self.client.delete(f"/suppliers/{supplier_id}")

    # --- tool handovers ---

    def list_handovers(self, **filters) -> Page:
        return self._list("handovers", filters)

    def get_handover(self, handover_id: str) -> Any:
        return self._get(f"/handovers/{handover_id}")

    def create_handover(self, project_id: str, pr_id: str, tool_set_description: str,
                        all_items: List[Mapping[str, Any]],
                        critical_spares: Optional[List[Mapping[str, Any]]] = None) -> Any:
        body = _drop_none({
            "projectId": project_id,
            "prId": pr_id,
            "toolSetDescription": tool_set_description,
            "allItems": list(all_items),
            "criticalSpares": critical_spares,
        })
        return self._post("/handovers", body)

    def approve_handover(self, handover_id: str, remarks: Optional[str] = None) -> Any:
        return self._post(f"/handovers/{handover_id}/approve", _drop_none({"remarks": remarks}))

    def reject_handover(self, handover_id: str, remarks: str) -> Any:
        return self._post(f"/handovers/{handover_id}/reject", {"remarks": remarks})

    # --- spares inventory ---

    def list_inventory(self, **filters) -> Page:
        return self._list("inventory", filters)

    def get_inventory_item(self, item_id: str) -> Any:
        return self._get(f"/inventory/{item_id}")

    def update_inventory_item(self, item_id: str, quantity: Optional[int] = None,
                              min_stock_level: Optional[int] = None, notes: Optional[str] = None) -> Any:
        body = _drop_none({"quantity": quantity, "minStockLevel": min_stock_level, "notes": notes})
        return self._put(f"/inventory/{item_id}", body)

    def adjust_inventory(self, item_id: str, quantity: int, adjustment_type: str, notes: Optional[str] = None) -> Any:
        if adjustment_type not in ADJUSTMENT_TYPES:
            raise ValueError(f"Unknown adjustment type {adjustment_type!r}, expected one of {ADJUSTMENT_TYPES}")
        body = _drop_none({"quantity": quantity, "type": adjustment_type, "notes": notes})
        return self._post(f"/inventory/{item_id}/adjust", body)

    def low_stock_items(self) -> List[Dict[str, Any]]:
        data = self.client.get("/inventory/low-stock").get("data")
        return data if isinstance(data, list) else []

    # --- spares requests ---

    def list_spares_requests(self, **filters) -> Page:
        return self._list("requests", filters)

    def get_spares_request(self, request_id: str) -> Any:
        return self._get(f"/requests/{request_id}")

    def create_spares_request(self, inventory_item_id: str, quantity_requested: int, purpose: str,
                              project_id: Optional[str] = None) -> Any:
        body = _drop_none({
            "inventoryItemId": inventory_item_id,
            "quantityRequested": quantity_requested,
            "projectId": project_id,
            "purpose": purpose,
        })
        return self._post("/requests", body)

    def fulfill_spares_request(self, request_id: str, quantity_fulfilled: int, notes: Optional[str] = None) -> Any:
        body = _drop_none({"quantityFulfilled": quantity_fulfilled, "notes": notes})
        return self._post(f"/requests/{request_id}/fulfill", body)

    def reject_spares_request(self, request_id: str, rejection_reason: str) -> Any:
        return self._post(f"/requests/{request_id}/reject", {"rejectionReason": rejection_reason})
