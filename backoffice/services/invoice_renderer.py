"""
Invoice document rendering.

Builds a one-page PDF for an issued invoice with reportlab's platypus layer
and returns the path it was written to. The path is stored on the invoice as
its document reference.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Protocol

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from backoffice.core.config import get_config
from backoffice.core.exceptions import DocumentRenderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvoiceDocument:
    """Values printed on the invoice; dates are the ones about to be persisted."""

    invoice_id: str
    invoice_number: str
    order_id: str
    company_id: str | None
    amount_total: Decimal
    issued_at: datetime
    due_at: datetime
    currency: str = "EUR"


class InvoiceRenderer(Protocol):
    def render(self, document: InvoiceDocument) -> str: ...


def _format_amount(amount: Decimal, currency: str) -> str:
    return f"{amount:,.2f} {currency}"


class PdfInvoiceRenderer:
    """Write invoices as PDF files under ``INVOICE_OUTPUT_DIR``."""

    def __init__(self, output_dir: str | Path | None = None) -> None:
        self.output_dir = Path(output_dir or get_config().INVOICE_OUTPUT_DIR)

    def render(self, document: InvoiceDocument) -> str:
        output_path = self.output_dir / f"{document.invoice_number}.pdf"
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            self._build(document, output_path)
        except (OSError, ValueError) as exc:
            logger.error(
                "invoice.render.failed",
                extra={
                    "event": "invoice.render.failed",
                    "invoice_id": document.invoice_id,
                    "path": str(output_path),
                    "error": str(exc),
                },
            )
            raise DocumentRenderError(f"Could not render invoice {document.invoice_number}: {exc}") from exc

        logger.info(
            "invoice.rendered",
            extra={"event": "invoice.rendered", "invoice_id": document.invoice_id, "path": str(output_path)},
        )
        return str(output_path)

    def _build(self, document: InvoiceDocument, output_path: Path) -> None:
        doc = SimpleDocTemplate(
            str(output_path),
            pagesize=A4,
            rightMargin=inch,
            leftMargin=inch,
            topMargin=inch,
            bottomMargin=inch,
            title=document.invoice_number,
        )
        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            "InvoiceTitle",
            parent=styles["Heading1"],
            fontSize=22,
            textColor=colors.HexColor("#2C3E50"),
            spaceAfter=24,
            alignment=TA_CENTER,
        )
        footer_style = ParagraphStyle(
            "Footer",
            parent=styles["Normal"],
            fontSize=9,
            textColor=colors.grey,
            alignment=TA_CENTER,
        )
        amount = _format_amount(document.amount_total, document.currency)

        elements = [
            Paragraph(f"INVOICE {document.invoice_number}", title_style),
            Spacer(1, 0.2 * inch),
        ]

        header = Table(
            [
                ["Customer company:", document.company_id or "-", "Issue date:", document.issued_at.strftime("%Y-%m-%d")],
                ["Order:", document.order_id, "Due date:", document.due_at.strftime("%Y-%m-%d")],
                ["", "", "Amount due:", amount],
            ],
            colWidths=[1.4 * inch, 2.3 * inch, 1.2 * inch, 1.4 * inch],
        )
        header.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                    ("FONTNAME", (2, 0), (2, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 10),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ]
            )
        )
        elements.extend([header, Spacer(1, 0.4 * inch)])

        lines = Table(
            [
                ["Description", "Total"],
                [f"Refurbished equipment order {document.order_id}", amount],
                ["Total due", amount],
            ],
            colWidths=[4.8 * inch, 1.5 * inch],
        )
        lines.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#3498DB")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                    ("LINEABOVE", (0, -1), (-1, -1), 1.5, colors.HexColor("#2C3E50")),
                    ("ALIGN", (1, 0), (1, -1), "RIGHT"),
                    ("GRID", (0, 0), (-1, -2), 0.5, colors.grey),
                ]
            )
        )
        elements.extend([lines, Spacer(1, 0.5 * inch)])

        days = (document.due_at.date() - document.issued_at.date()).days
        elements.append(Paragraph("<b>Payment terms</b>", styles["Heading2"]))
        elements.append(
            Paragraph(
                f"Payment due within {days} days. Please quote {document.invoice_number} as the transfer reference.",
                styles["Normal"],
            )
        )
        elements.append(Spacer(1, 0.5 * inch))
        elements.append(Paragraph("Thank you for choosing refurbished equipment.", footer_style))

        doc.build(elements)
