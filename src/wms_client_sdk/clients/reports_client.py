from __future__ import annotations

from dataclasses import dataclass

from ..models_reports import XLSX_CONTENT_TYPE, ReportDocument, ReportKind
from .base import BaseClient


@dataclass
class ReportsClient(BaseClient):
    module: str = "reports"

    def stock_report(self) -> ReportDocument:
        return self._fetch_report("/report/stock_report", ReportKind.STOCK)

    def orders_report(self) -> ReportDocument:
        return self._fetch_report("/report/orders_report", ReportKind.ORDERS)

    def order_report(self, order_id: int) -> ReportDocument:
        return self._fetch_report(f"/report/order-report/{order_id}", ReportKind.ORDER, order_id=order_id)

    def _fetch_report(self, path: str, kind: ReportKind, order_id: int | None = None) -> ReportDocument:
        payload = self.http.request_bytes(
            "GET",
            path,
            accept=XLSX_CONTENT_TYPE,
            module=self.module,
            operation=f"{kind.value}_report",
        )
        return ReportDocument(
            kind=kind,
            content=payload.content,
            content_type=payload.content_type,
            server_filename=payload.filename,
            order_id=order_id,
        )
