"""Google Sheets adapter: header upkeep, row appends, cell highlighting."""

from __future__ import annotations

import logging
import re

from gmail_reply_tracker.constants import HEADERS
from gmail_reply_tracker.gmail_client import execute_request

logger = logging.getLogger(__name__)

_RANGE_START_ROW_RE = re.compile(r"![A-Z]+(\d+)")


def quote_sheet_name(name: str) -> str:
    """Quote a sheet title for A1 notation."""
    return "'" + name.replace("'", "''") + "'"


def hex_to_rgb(color: str) -> dict[str, float]:
    """Convert '#RRGGBB' into a Sheets API Color."""
    color = color.lstrip("#")
    r, g, b = (int(color[i:i + 2], 16) / 255 for i in (0, 2, 4))
    return {"red": r, "green": g, "blue": b}


def _column_letter(index: int) -> str:
    """1-based column index -> A1 column letters."""
    letters = ""
    while index:
        index, rem = divmod(index - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


class SheetWriter:
    """Appends tracked replies to one tab of a spreadsheet."""

    def __init__(self, service, spreadsheet_id: str, sheet_name: str, headers: list[str] | None = None) -> None:
        self.service = service
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self.headers = headers or HEADERS
        self.sheet_id: int | None = None
        self._frozen_rows = 0

    @property
    def _values(self):
        return self.service.spreadsheets().values()

    def _batch_update(self, requests: list[dict]) -> dict:
        return execute_request(
            self.service.spreadsheets().batchUpdate(
                spreadsheetId=self.spreadsheet_id, body={"requests": requests}
            )
        )

    # --- setup ---

    def ensure_sheet(self) -> None:
        """Create the tab if needed and make sure row 1 holds the full header.

        An empty first row gets the header plus bold/frozen formatting.  A
        header shorter than ours is overwritten with ours; extra columns
        beyond it are left alone.
        """
        meta = execute_request(
            self.service.spreadsheets().get(
                spreadsheetId=self.spreadsheet_id, fields="sheets.properties"
            )
        )
        for sheet in meta.get("sheets", []):
            props = sheet["properties"]
            if props.get("title") == self.sheet_name:
                self.sheet_id = props["sheetId"]
                self._frozen_rows = props.get("gridProperties", {}).get("frozenRowCount", 0)
                break
        else:
            reply = self._batch_update([{"addSheet": {"properties": {"title": self.sheet_name}}}])
            self.sheet_id = reply["replies"][0]["addSheet"]["properties"]["sheetId"]
            self._frozen_rows = 0
            logger.info("Created sheet %s", self.sheet_name)

        resp = execute_request(
            self._values.get(
                spreadsheetId=self.spreadsheet_id,
                range=f"{quote_sheet_name(self.sheet_name)}!1:1",
            )
        )
        existing = (resp.get("values") or [[]])[0]

        if not existing:
            self._write_header()
            self.apply_formatting()
        elif len(existing) < len(self.headers):
            logger.info(
                "Header of %s has %d columns, backfilling to %d",
                self.sheet_name, len(existing), len(self.headers),
            )
            self._write_header()

    def _write_header(self) -> None:
        execute_request(
            self._values.update(
                spreadsheetId=self.spreadsheet_id,
                range=f"{quote_sheet_name(self.sheet_name)}!A1:{_column_letter(len(self.headers))}1",
                valueInputOption="RAW",
                body={"values": [self.headers]},
            )
        )

    # --- writes ---

    def append_rows(self, rows: list[list]) -> int:
        """Append rows after the last used row and return the first row number."""
        resp = execute_request(
            self._values.append(
                spreadsheetId=self.spreadsheet_id,
                range=f"{quote_sheet_name(self.sheet_name)}!A1",
                valueInputOption="USER_ENTERED",
                insertDataOption="INSERT_ROWS",
                body={"values": rows},
            )
        )
        updated_range = resp.get("updates", {}).get("updatedRange", "")
        m = _RANGE_START_ROW_RE.search(updated_range)
        if not m:
            raise ValueError(f"Unexpected append range: {updated_range!r}")
        return int(m.group(1))

    def apply_formatting(self, cell_colors: list[tuple[int, int, str]] | None = None) -> None:
        """Color single cells, bold the header and freeze row 1.

        ``cell_colors`` holds (row, column, '#RRGGBB') with 1-based indices.
        """
        requests: list[dict] = []
        for row, col, color in cell_colors or []:
            requests.append(
                {
                    "repeatCell": {
                        "range": {
                            "sheetId": self.sheet_id,
                            "startRowIndex": row - 1,
                            "endRowIndex": row,
                            "startColumnIndex": col - 1,
                            "endColumnIndex": col,
                        },
                        "cell": {"userEnteredFormat": {"backgroundColor": hex_to_rgb(color)}},
                        "fields": "userEnteredFormat.backgroundColor",
                    }
                }
            )

        if self._frozen_rows == 0:
            requests.append(
                {
                    "updateSheetProperties": {
                        "properties": {"sheetId": self.sheet_id, "gridProperties": {"frozenRowCount": 1}},
                        "fields": "gridProperties.frozenRowCount",
                    }
                }
            )
        requests.append(
            {
                "repeatCell": {
                    "range": {
                        "sheetId": self.sheet_id,
                        "startRowIndex": 0,
                        "endRowIndex": 1,
                        "startColumnIndex": 0,
                        "endColumnIndex": len(self.headers),
                    },
                    "cell": {"userEnteredFormat": {"textFormat": {"bold": True}}},
                    "fields": "userEnteredFormat.textFormat.bold",
                }
            }
        )

        self._batch_update(requests)
        self._frozen_rows = max(self._frozen_rows, 1)
