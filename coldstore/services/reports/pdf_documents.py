# coldstore/services/reports/pdf_documents.py
"""
PDF documents drawn straight onto a reportlab canvas: the farmer account
ledger, the period (daily) report, and the incoming/outgoing gate-pass
slips. Every builder returns the finished file as bytes.
"""

from datetime import datetime
from io import BytesIO
from typing import Any, Dict, List, Optional, Sequence, Union

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from coldstore.models.analytics_models import ReportsData
from coldstore.models.gate_pass_models import DELIVERY, RECEIPT, GatePass
from coldstore.services.reports.gate_pass_qr import gate_pass_qr_image, qr_payload
from coldstore.services.reports.ledger_rows import DASH, LedgerRows, build_ledger_rows, format_pdf_date
from coldstore.services.reports.outgoing_breakdown import (
    FORMAT_ALLOCATIONS,
    FORMAT_SNAPSHOTS,
    location_label,
    outgoing_breakdown,
)

# ─── PALETTE ───
INK = HexColor("#1F2937")
MUTED = HexColor("#6B7280")
RULE = HexColor("#D1D5DB")
ACCENT = HexColor("#1B4332")
HEADER_FG = HexColor("#FFFFFF")
ZEBRA = HexColor("#F3F4F6")
TOTAL_BG = HexColor("#E5E7EB")

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

MARGIN = 28
HEADER_H = 16
ROW_H = 13
QR_SIZE = 78

PassLike = Union[GatePass, Dict[str, Any]]


def _num(n) -> str:
    if isinstance(n, float) and not n.is_integer():
        return f"{n:,.2f}"
    return f"{int(n):,}"


def _qty(n) -> str:
    # blank size cells print as "-"
    return _num(n) if n else DASH


class PdfDocument:
    """Cursor-based canvas writer; `y` walks down the page."""

    def __init__(self, title: str, pagesize=A4, footer: Optional[str] = None):
        self.buffer = BytesIO()
        self.W, self.H = pagesize
        self.content_w = self.W - 2 * MARGIN
        self.c = canvas.Canvas(self.buffer, pagesize=pagesize)
        self.c.setTitle(title)
        if footer:
            self.c.setAuthor(footer)
        self.footer = footer
        self.page_num = 0
        self.y = self.H - MARGIN
        self.new_page()

    def finish(self) -> bytes:
        self._draw_footer()
        self.c.save()
        return self.buffer.getvalue()

    # ─── DRAWING PRIMITIVES ───

    def draw_rect(self, x, y, w, h, fill=None, stroke=None, stroke_w=0.5):
        self.c.saveState()
        if fill:
            self.c.setFillColor(fill)
        if stroke:
            self.c.setStrokeColor(stroke)
            self.c.setLineWidth(stroke_w)
        self.c.rect(x, y, w, h, fill=1 if fill else 0, stroke=1 if stroke else 0)
        self.c.restoreState()

    def draw_line(self, x1, y1, x2, y2, color=RULE, width=0.5):
        self.c.saveState()
        self.c.setStrokeColor(color)
        self.c.setLineWidth(width)
        self.c.line(x1, y1, x2, y2)
        self.c.restoreState()

    def draw_text(self, text, x, y, font=FONT, size=8, color=INK, align="left", max_width=None):
        text = str(text)
        self.c.saveState()
        self.c.setFont(font, size)
        self.c.setFillColor(color)
        if max_width:
            while self.c.stringWidth(text, font, size) > max_width and len(text) > 3:
                text = text[:-4] + "..."
        if align == "center":
            self.c.drawCentredString(x, y, text)
        elif align == "right":
            self.c.drawRightString(x, y, text)
        else:
            self.c.drawString(x, y, text)
        self.c.restoreState()

    def draw_wrapped_text(self, text, x, max_width, font=FONT, size=8.5, color=INK, leading=11):
        words = str(text).split()
        lines, current = [], ""
        for word in words:
            test = current + (" " if current else "") + word
            if self.c.stringWidth(test, font, size) <= max_width:
                current = test
            else:
                if current:
                    lines.append(current)
                current = word
        if current:
            lines.append(current)
        for line in lines:
            self.ensure_space(leading)
            self.draw_text(line, x, self.y - size - 1, font, size, color)
            self.y -= leading

    # ─── PAGE INFRASTRUCTURE ───

    def new_page(self):
        if self.page_num > 0:
            self._draw_footer()
            self.c.showPage()
        self.page_num += 1
        self.y = self.H - MARGIN

    def _draw_footer(self):
        self.draw_line(MARGIN, MARGIN - 6, self.W - MARGIN, MARGIN - 6)
        if self.footer:
            self.draw_text(self.footer, MARGIN, MARGIN - 16, size=7, color=MUTED)
        self.draw_text(f"Page {self.page_num}", self.W - MARGIN, MARGIN - 16, size=7, color=MUTED, align="right")

    def ensure_space(self, needed) -> bool:
        """Start a new page when `needed` points do not fit; True if it did."""
        if self.y - needed < MARGIN + 6:
            self.new_page()
            return True
        return False

    # ─── BLOCKS ───

    def heading(self, company: str, title: str, subtitle: Optional[str] = None):
        center = self.W / 2
        self.draw_text(company, center, self.y - 16, FONT_BOLD, 15, INK, align="center")
        self.y -= 22
        self.draw_text(title, center, self.y - 11, FONT_BOLD, 10.5, ACCENT, align="center")
        self.y -= 15
        if subtitle:
            self.draw_text(subtitle, center, self.y - 10, FONT, 8.5, MUTED, align="center")
            self.y -= 14
        self.draw_line(MARGIN, self.y - 3, self.W - MARGIN, self.y - 3, INK, 0.8)
        self.y -= 12

    def section_title(self, text: str):
        self.ensure_space(HEADER_H + ROW_H * 2 + 18)
        self.draw_text(text, MARGIN, self.y - 11, FONT_BOLD, 9.5, ACCENT)
        self.y -= 17

    def key_values(self, pairs: Sequence[tuple], columns: int = 2, label_w: float = 72):
        col_w = self.content_w / columns
        for start in range(0, len(pairs), columns):
            self.ensure_space(13)
            for i, (label, value) in enumerate(pairs[start:start + columns]):
                x = MARGIN + i * col_w
                self.draw_text(f"{label}:", x, self.y - 10, FONT_BOLD, 8, MUTED)
                self.draw_text(value, x + label_w, self.y - 10, FONT, 8, INK, max_width=col_w - label_w - 6)
            self.y -= 13
        self.y -= 5

    def note(self, text: str):
        self.ensure_space(16)
        self.draw_text(text, MARGIN, self.y - 10, FONT, 8.5, MUTED)
        self.y -= 16

    def signature(self, labels: Sequence[str]):
        self.ensure_space(46)
        self.y -= 30
        slot = self.content_w / len(labels)
        for i, label in enumerate(labels):
            x = MARGIN + i * slot
            self.draw_line(x + 10, self.y, x + slot - 10, self.y, INK, 0.6)
            self.draw_text(label, x + slot / 2, self.y - 10, FONT, 8, MUTED, align="center")
        self.y -= 16

    def qr(self, image, x, y, size=QR_SIZE):
        self.c.drawImage(ImageReader(image), x, y, width=size, height=size)

    # ─── TABLES ───

    def _widths(self, headers: Sequence[str], weights: Optional[Sequence[float]]) -> List[float]:
        weights = list(weights) if weights else [1.0] * len(headers)
        total = float(sum(weights))
        return [self.content_w * w / total for w in weights]

    def _table_header(self, headers, widths):
        self.draw_rect(MARGIN, self.y - HEADER_H, self.content_w, HEADER_H, fill=ACCENT)
        x = MARGIN
        for text, w in zip(headers, widths):
            self.draw_text(text, x + 3, self.y - 11, FONT_BOLD, 7, HEADER_FG, max_width=w - 5)
            x += w
        self.y -= HEADER_H

    def _table_row(self, values, widths, fill=None, bold=False):
        if fill:
            self.draw_rect(MARGIN, self.y - ROW_H, self.content_w, ROW_H, fill=fill)
        x = MARGIN
        font = FONT_BOLD if bold else FONT
        for val, w in zip(values, widths):
            if isinstance(val, (int, float)) and not isinstance(val, bool):
                self.draw_text(_num(val), x + w - 3, self.y - 9, font, 7.5, INK, align="right")
            else:
                self.draw_text(val if val is not None else "", x + 3, self.y - 9, font, 7.5, INK, max_width=w - 5)
            x += w
        self.draw_line(MARGIN, self.y - ROW_H, MARGIN + self.content_w, self.y - ROW_H, RULE, 0.3)
        self.y -= ROW_H

    def table(self, headers, rows, weights=None, totals=None, lead_rows=None):
        """Header repeats on every page the table spills onto."""
        widths = self._widths(headers, weights)
        self.ensure_space(HEADER_H + ROW_H * 2)
        self._table_header(headers, widths)
        for i, row in enumerate(list(lead_rows or []) + list(rows)):
            if self.ensure_space(ROW_H):
                self._table_header(headers, widths)
            self._table_row(row, widths, fill=ZEBRA if i % 2 else None, bold=i < len(lead_rows or []))
        if totals is not None:
            if self.ensure_space(ROW_H):
                self._table_header(headers, widths)
            self._table_row(totals, widths, fill=TOTAL_BG, bold=True)
        self.y -= 10


# ─────────────────────────────────────────────
# LEDGER TABLES (farmer + period reports)
# ─────────────────────────────────────────────
def _lead_cols(include_account: bool) -> List[str]:
    cols = ["DATE", "VOUCHER"]
    if include_account:
        cols.append("A/c")
    return cols + ["VARIETY", "CH", "FL", "ROW"]


def _lead_weights(include_account: bool) -> List[float]:
    w = [1.3, 1.1]
    if include_account:
        w.append(0.8)
    return w + [1.8, 0.7, 0.7, 0.7]


def _lead_cells(r, include_account: bool) -> List[Any]:
    cells: List[Any] = [r.date, r.voucher]
    if include_account:
        cells.append(r.account or "")
    return cells + [r.variety, r.chamber or DASH, r.floor or DASH, r.row or DASH]


def _draw_ledger(doc: PdfDocument, ledger: LedgerRows, size_columns: Sequence[str], include_account: bool):
    lead = _lead_cols(include_account)
    blank_lead = [""] * len(lead)
    sizes = list(size_columns)

    doc.section_title("RECEIPTS")
    if ledger.receipt_rows:
        doc.table(
            lead + sizes + ["TOTAL", "G.TOTAL", "REMARKS"],
            [
                _lead_cells(r, include_account) + [_qty(r.sizeQtys.get(s, 0)) for s in sizes]
                + [r.rowTotal, r.runningTotal, r.remarks or DASH]
                for r in ledger.receipt_rows
            ],
            weights=_lead_weights(include_account) + [0.9] * len(sizes) + [1.0, 1.1, 2.2],
            totals=["Total"] + blank_lead[1:] + [ledger.receipt_totals_by_size.get(s, 0) for s in sizes]
            + [ledger.total_received, "", ""],
        )
    else:
        doc.note("No receipts in this period.")

    doc.section_title("DELIVERIES")
    if ledger.delivery_rows:
        opening = blank_lead[:]
        opening[0] = "Opening balance"
        doc.table(
            lead + sizes + ["TOTAL", "G.TOTAL"],
            [
                _lead_cells(r, include_account) + [_qty(r.sizeQtys.get(s, 0)) for s in sizes]
                + [r.rowTotal, r.runningTotal]
                for r in ledger.delivery_rows
            ],
            weights=_lead_weights(include_account) + [0.9] * len(sizes) + [1.0, 1.1],
            lead_rows=[opening + [""] * len(sizes) + ["", ledger.opening_balance]],
            totals=["Total"] + blank_lead[1:] + [ledger.delivery_totals_by_size.get(s, 0) for s in sizes]
            + [ledger.total_delivered, ledger.closing_balance],
        )
    else:
        doc.note("No deliveries in this period.")

    doc.section_title("SUMMARY")
    doc.key_values(
        [
            ("Total received", _num(ledger.total_received)),
            ("Total delivered", _num(ledger.total_delivered)),
            ("Closing balance", _num(ledger.closing_balance)),
        ],
        columns=3,
        label_w=80,
    )


def farmer_report_pdf(
    company_name: str,
    farmer: Dict[str, Any],
    incoming: Sequence[PassLike],
    outgoing: Sequence[PassLike],
    size_columns: Sequence[str],
    report_date: Optional[str] = None,
) -> bytes:
    ledger = build_ledger_rows(incoming, outgoing, size_columns)
    name = farmer.get("name") or DASH
    doc = PdfDocument(f"Farmer report - {name}", landscape(A4), footer=company_name)
    doc.heading(company_name, "FARMER ACCOUNT LEDGER", f"Report date: {report_date or datetime.now().strftime('%d/%m/%y')}")
    doc.key_values(
        [
            ("Name", name),
            ("A/c No.", farmer.get("accountNumber") or DASH),
            ("Mobile", farmer.get("mobileNumber") or DASH),
            ("Address", farmer.get("address") or DASH),
        ]
    )
    _draw_ledger(doc, ledger, size_columns, include_account=False)
    return doc.finish()


def daily_report_pdf(
    company_name: str,
    date_range_label: str,
    data: ReportsData,
    size_columns: Sequence[str],
) -> bytes:
    """Grouped data gets one page block per farmer; flat data one ledger with an A/c column."""
    doc = PdfDocument(f"Daily report {date_range_label}", landscape(A4), footer=company_name)

    if data.is_grouped:
        if not data.farmers:
            doc.heading(company_name, "DAILY REPORTS", date_range_label)
            doc.note("No report data for this period.")
            return doc.finish()

        for i, block in enumerate(data.farmers):
            if i:
                doc.new_page()
            doc.heading(company_name, "DAILY REPORTS", date_range_label)
            doc.key_values(
                [
                    ("Name", block.farmer.name or DASH),
                    ("A/c No.", block.farmer.accountNumber if block.farmer.accountNumber is not None else DASH),
                    ("Mobile", block.farmer.mobileNumber or DASH),
                    ("Address", block.farmer.address or DASH),
                ]
            )
            ledger = build_ledger_rows(block.incoming, block.outgoing, size_columns)
            _draw_ledger(doc, ledger, size_columns, include_account=False)
        return doc.finish()

    doc.heading(company_name, "DAILY REPORTS", date_range_label)
    ledger = build_ledger_rows(data.incoming, data.outgoing, size_columns, include_account=True)
    _draw_ledger(doc, ledger, size_columns, include_account=True)
    return doc.finish()


# ─────────────────────────────────────────────
# GATE PASS SLIPS
# ─────────────────────────────────────────────
def _as_pass(entry: PassLike, kind: str) -> GatePass:
    if isinstance(entry, GatePass):
        return entry
    return GatePass.model_validate(dict(entry, type=entry.get("type") or kind))


def _slip_header(doc: PdfDocument, company_name: str, title: str, gp: GatePass, storage_address: Optional[str]):
    label = f"#{gp.gatePassNo}"
    qr_img = gate_pass_qr_image(qr_payload(gp.id, gp.gatePassNo, gp.type), label=label)
    doc.qr(qr_img, doc.W - MARGIN - QR_SIZE, doc.H - MARGIN - QR_SIZE)

    subtitle = f"Gate pass {label}"
    if gp.manualParchiNumber:
        subtitle += f"  ·  Manual parchi {gp.manualParchiNumber}"
    doc.heading(company_name, title, subtitle)
    if storage_address:
        doc.note(storage_address)
    # keep the details clear of the QR code
    doc.y = min(doc.y, doc.H - MARGIN - QR_SIZE - 8)


def _remarks(doc: PdfDocument, gp: GatePass):
    if gp.remarks and gp.remarks.strip():
        doc.section_title("REMARKS")
        doc.draw_wrapped_text(gp.remarks.strip(), MARGIN, doc.content_w)
        doc.y -= 6


def incoming_slip_pdf(company_name: str, entry: PassLike, storage_address: Optional[str] = None) -> bytes:
    gp = _as_pass(entry, RECEIPT)
    doc = PdfDocument(f"Incoming gate pass {gp.gatePassNo}", A4, footer=company_name)
    _slip_header(doc, company_name, "INCOMING GATE PASS", gp, storage_address)

    total = gp.total_bags()
    doc.key_values(
        [
            ("A/c No", f"#{gp.account_number}" if gp.account_number is not None else DASH),
            ("Date", format_pdf_date(gp.date)),
            ("Name", gp.farmer_name or DASH),
            ("Bags", _num(total)),
            ("Variety", gp.variety or DASH),
            ("Created By", gp.createdBy.name or DASH),
            ("Truck No", gp.truckNumber or DASH),
        ]
    )

    doc.section_title("ORDER DETAILS")
    doc.table(
        ["SIZE", "LOCATION", "INITIAL QTY", "CURRENT QTY"],
        [[b.name or DASH, location_label(b.location), b.initialQuantity, b.currentQuantity] for b in gp.bagSizes],
        weights=[2, 2, 1.2, 1.2],
        totals=["Total", "", total, sum(b.currentQuantity for b in gp.bagSizes)],
    )
    doc.key_values([("Total Bags Received", _num(total))], columns=1, label_w=110)
    _remarks(doc, gp)
    doc.signature(["Received By", "Store Incharge"])
    return doc.finish()


def outgoing_slip_pdf(company_name: str, entry: PassLike, storage_address: Optional[str] = None) -> bytes:
    gp = _as_pass(entry, DELIVERY)
    doc = PdfDocument(f"Outgoing gate pass {gp.gatePassNo}", A4, footer=company_name)
    _slip_header(doc, company_name, "OUTGOING GATE PASS", gp, storage_address)

    breakdown = outgoing_breakdown(gp)
    doc.key_values(
        [
            ("A/c No", f"#{gp.account_number}" if gp.account_number is not None else DASH),
            ("Date", format_pdf_date(gp.date)),
            ("Name", gp.farmer_name or DASH),
            ("Bags", _num(breakdown.totalIssued)),
            ("From", gp.from_ or DASH),
            ("To", gp.to or DASH),
            ("Truck No", gp.truckNumber or DASH),
            ("Created By", gp.createdBy.name or DASH),
        ]
    )

    doc.section_title("ISSUED STOCK")
    rows = breakdown.rows
    if breakdown.format == FORMAT_ALLOCATIONS:
        doc.table(
            ["SIZE", "VARIETY", "REF NO.", "ISSUED"],
            [[r.size, r.variety, str(r.refNo), r.issuedQty] for r in rows],
            weights=[2, 2, 1.2, 1.2],
            totals=["Total", "", "", breakdown.totalIssued],
        )
    elif breakdown.format == FORMAT_SNAPSHOTS:
        doc.table(
            ["SIZE", "VARIETY", "LOCATION", "REF NO.", "INITIAL", "ISSUED", "AVAILABLE"],
            [[r.size, r.variety, r.location, str(r.refNo), r.initialQty, r.issuedQty, r.availableQty] for r in rows],
            weights=[1.5, 1.5, 1.4, 1, 1, 1, 1],
            totals=["Total", "", "", "", "", breakdown.totalIssued, breakdown.totalAvailable],
        )
    elif rows:
        doc.table(
            ["SIZE", "VARIETY", "LOCATION", "REF NO.", "ISSUED", "AVAILABLE"],
            [[r.size or DASH, r.variety, r.location, str(r.refNo), r.issuedQty, r.availableQty] for r in rows],
            weights=[1.5, 1.5, 1.4, 1, 1, 1],
            totals=["Total", "", "", "", breakdown.totalIssued, breakdown.totalAvailable],
        )
    else:
        doc.note("No issued stock recorded on this gate pass.")

    summary = [("Bags issued", _num(breakdown.totalIssued))]
    if breakdown.totalAvailable:
        summary.append(("Bags still available", _num(breakdown.totalAvailable)))
    doc.key_values(summary, columns=2, label_w=110)
    _remarks(doc, gp)
    doc.signature(["Delivered By", "Received By"])
    return doc.finish()
