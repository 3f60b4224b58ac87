"""
Spreadsheet record store.

The table is the active worksheet of an openpyxl workbook, in the fixed
COLUMNS order. Row 1 is always the header and never read as data. With a
path the workbook lives in an .xlsx file that is loaded in full before, and
saved in full after, every operation; without one it lives in memory.
"""
import logging
from pathlib import Path
from typing import Iterator, Optional, Sequence, Tuple

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font
from openpyxl.worksheet.worksheet import Worksheet

from bono.core.exceptions import DuplicateRecordError, NotFoundError
from bono.core.normalize import normalize_metric, normalize_timestamp
from bono.schemas.bonus import BonusRecord, MetricValues, RecordKey
from bono.stores.base import COLUMNS, RecordStore, record_to_row

logger = logging.getLogger(__name__)

SHEET_TITLE = "Bonos"


def _text(value) -> str:
    return "" if value is None else str(value)


def row_to_record(row: Sequence) -> BonusRecord:
    cells = list(row) + [None] * (len(COLUMNS) - len(row))
    return BonusRecord(
        agent_id=_text(cells[0]).strip(),
        name=_text(cells[1]),
        email=_text(cells[2]),
        sales=normalize_metric(cells[3]),
        quality=normalize_metric(cells[4]),
        absenteeism=normalize_metric(cells[5]),
        total_bono=normalize_metric(cells[6]),
        timestamp=normalize_timestamp(cells[7]),
    )


def new_workbook() -> Workbook:
    """Workbook whose active sheet holds only the header row."""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    ws.append(COLUMNS)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    return wb


class SheetRecordStore(RecordStore):

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path) if path else None
        self._wb: Workbook = new_workbook()
        if self.path is not None and not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._wb.save(self.path)

    def _open(self) -> Workbook:
        if self.path is None:
            return self._wb
        return load_workbook(self.path)

    def _commit(self, wb: Workbook) -> None:
        self._wb = wb
        if self.path is None:
            return
        wb.save(self.path)
        logger.debug(f"Saved {wb.active.max_row - 1} rows to {self.path}")

    @staticmethod
    def _data_rows(ws: Worksheet) -> Iterator[Tuple[int, BonusRecord]]:
        """(row number, record) for every non-blank row below the header."""
        for index, row in enumerate(ws.iter_rows(min_row=2, values_only=True), start=2):
            if not any(_text(cell).strip() for cell in row):
                continue
            yield index, row_to_record(row)

    def _find_row(self, ws: Worksheet, key: RecordKey) -> Optional[int]:
        for index, record in self._data_rows(ws):
            if record.key == key:
                return index
        return None

    def insert(self, record: BonusRecord) -> BonusRecord:
        wb = self._open()
        ws = wb.active
        if self._find_row(ws, record.key) is not None:
            raise DuplicateRecordError(
                f"Record already exists for agent '{record.agent_id}' at {record.timestamp}"
            )
        if ws.max_row == 1 and ws.cell(row=1, column=1).value is None:
            # Sheet was emptied by hand; restore the header first
            for column, title in enumerate(COLUMNS, start=1):
                ws.cell(row=1, column=column, value=title)
        ws.append(record_to_row(record))
        self._commit(wb)
        return record

    def list_all(self):
        return [record for _, record in self._data_rows(self._open().active)]

    def find_by_key(self, key: RecordKey) -> Optional[BonusRecord]:
        ws = self._open().active
        for _, record in self._data_rows(ws):
            if record.key == key:
                return record
        return None

    def update(self, key: RecordKey, metrics: MetricValues, total_bono: float) -> BonusRecord:
        wb = self._open()
        ws = wb.active
        index = self._find_row(ws, key)
        if index is None:
            raise NotFoundError(f"No record for agent '{key.agent_id}' at {key.timestamp}")

        current = row_to_record([cell.value for cell in ws[index]])
        updated = current.model_copy(update={
            "sales": metrics.sales,
            "quality": metrics.quality,
            "absenteeism": metrics.absenteeism,
            "total_bono": total_bono,
        })
        for column, value in enumerate(record_to_row(updated), start=1):
            ws.cell(row=index, column=column, value=value)
        self._commit(wb)
        return updated

    def delete(self, key: RecordKey) -> None:
        wb = self._open()
        ws = wb.active
        index = self._find_row(ws, key)
        if index is None:
            raise NotFoundError(f"No record for agent '{key.agent_id}' at {key.timestamp}")
        ws.delete_rows(index)
        self._commit(wb)
