from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path, PurePosixPath

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class ReportKind(str, Enum):
    STOCK = "stock"
    ORDERS = "orders"
    ORDER = "order"


@dataclass(frozen=True)
class ReportDocument:
    """Spreadsheet returned by the server; the bytes are never parsed here."""

    kind: ReportKind
    content: bytes
    content_type: str | None
    server_filename: str | None = None
    order_id: int | None = None

    def default_filename(self, today: date | None = None) -> str:
        """The name the server suggested, else a dated one.

        Only the last path segment of a server name is kept, so a
        Content-Disposition cannot point outside the reports directory.
        """
        suggested = PurePosixPath((self.server_filename or "").replace("\\", "/")).name.strip()
        if suggested and not suggested.startswith("."):
            return suggested
        stamp = (today or date.today()).isoformat()
        if self.kind is ReportKind.ORDER and self.order_id is not None:
            return f"order_report_{self.order_id}_{stamp}.xlsx"
        return f"{self.kind.value}_report_{stamp}.xlsx"

    def save(self, directory: str | Path, filename: str | None = None) -> Path:
        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / (filename or self.default_filename())
        path.write_bytes(self.content)
        return path
