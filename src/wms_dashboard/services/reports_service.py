from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from wms_client_sdk import ApiSession, ReportDocument, ReportKind

from .errors import normalize_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SavedReport:
    kind: ReportKind
    path: Path
    size_bytes: int


class ReportsService:
    def __init__(self, session: ApiSession, reports_dir: str | Path = "reports") -> None:
        self.session = session
        self.reports_dir = Path(reports_dir)

    def fetch(self, kind: ReportKind | str, order_id: int | None = None) -> ReportDocument:
        kind = ReportKind(kind)
        client = self.session.reports_client()
        try:
            if kind is ReportKind.ORDER:
                if order_id is None:
                    raise ValueError("order_id is required for an order report")
                return client.order_report(order_id)
            if kind is ReportKind.ORDERS:
                return client.orders_report()
            return client.stock_report()
        except Exception as exc:
            raise normalize_error(exc, "Report download failed") from exc

    def download(
        self,
        kind: ReportKind | str,
        order_id: int | None = None,
        *,
        today: date | None = None,
    ) -> SavedReport:
        document = self.fetch(kind, order_id)
        try:
            path = document.save(self.reports_dir, document.default_filename(today))
        except OSError as exc:
            raise normalize_error(exc, "Could not save the report") from exc
        logger.info("report_saved", extra={"kind": document.kind.value, "path": str(path)})
        return SavedReport(kind=document.kind, path=path, size_bytes=len(document.content))
