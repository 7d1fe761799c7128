"""CSV, JSON and PDF exports of registrations for the organisers"""

import csv
import io
import json
from datetime import datetime
from typing import Dict, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from soapbox_portal.models.registration import TeamMember, TeamRegistration

CSV_HEADERS = [
    "Team Name",
    "Captain Name",
    "Email",
    "Phone",
    "Age Range",
    "Soapbox Name",
    "Participants",
    "Members",
    "Status",
    "Checked In At",
    "File",
    "Created At",
]

TEAM_LIST_HEADERS = ["Team Name", "Category", "Contact", "Phone", "Status"]

PDF_MARGIN = 20 * mm


def _members_cell(members: List[TeamMember]) -> str:
    return "; ".join(f"{m.name} ({m.age})" for m in members)


def _iso(value) -> str:
    return value.isoformat() if value else ""


def to_csv(
    registrations: List[TeamRegistration],
    members_by_registration: Dict,
) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADERS)
    for reg in registrations:
        writer.writerow(
            [
                reg.team_name,
                reg.captain_name,
                reg.email,
                reg.phone_number,
                reg.age_range,
                reg.soapbox_name,
                reg.participants_count,
                _members_cell(members_by_registration.get(reg.id, [])),
                reg.status.value,
                _iso(reg.checked_in_at),
                reg.file_ref or "",
                _iso(reg.created_at),
            ]
        )
    return buffer.getvalue()


def to_json(
    registrations: List[TeamRegistration],
    members_by_registration: Dict,
) -> str:
    rows = []
    for reg in registrations:
        row = {
            "id": str(reg.id),
            "team_name": reg.team_name,
            "captain_name": reg.captain_name,
            "email": reg.email,
            "phone_number": reg.phone_number,
            "age_range": reg.age_range,
            "soapbox_name": reg.soapbox_name,
            "design_description": reg.design_description,
            "dimensions": reg.dimensions,
            "brakes_steering": reg.brakes_steering,
            "participants_count": reg.participants_count,
            "file_ref": reg.file_ref,
            "status": reg.status.value,
            "checked_in_at": _iso(reg.checked_in_at) or None,
            "created_at": _iso(reg.created_at),
            "updated_at": _iso(reg.updated_at),
        }
        row["members"] = [
            {"name": m.name, "age": m.age}
            for m in members_by_registration.get(reg.id, [])
        ]
        rows.append(row)
    return json.dumps(rows, indent=2)


def team_list_rows(registrations: List[TeamRegistration]) -> List[List[str]]:
    """One printable row per team for the event-day sheet"""
    rows = []
    for reg in registrations:
        if reg.checked_in_at:
            arrival = f"Checked In ({reg.checked_in_at:%H:%M})"
        else:
            arrival = "Not Checked In"
        rows.append(
            [
                reg.team_name,
                reg.age_range or "",
                reg.captain_name,
                reg.phone_number or "",
                arrival,
            ]
        )
    return rows


def _draw_page_number(canvas, doc):
    canvas.saveState()
    canvas.setFont("Helvetica", 9)
    canvas.drawRightString(A4[0] - PDF_MARGIN, 10 * mm, f"Page {doc.page}")
    canvas.restoreState()


def to_team_list_pdf(
    registrations: List[TeamRegistration],
    event_name: str,
    title: str = "Team List",
    generated_at: Optional[datetime] = None,
) -> bytes:
    """Render the check-in sheet: a heading, then a table with one row per team.

    The header row repeats on every page and each page is numbered.
    """
    generated_at = generated_at or datetime.now()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=PDF_MARGIN,
        rightMargin=PDF_MARGIN,
        topMargin=PDF_MARGIN,
        bottomMargin=PDF_MARGIN,
        title=f"{event_name} - {title}",
    )
    styles = getSampleStyleSheet()

    table = Table([TEAM_LIST_HEADERS] + team_list_rows(registrations), repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#3b82f6")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f3f4f6")]),
                ("TOPPADDING", (0, 0), (-1, -1), 3),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
            ]
        )
    )

    story = [
        Paragraph(escape(event_name), styles["Title"]),
        Paragraph(escape(title), styles["Heading2"]),
        Paragraph(f"Generated: {generated_at:%Y-%m-%d %H:%M}", styles["Normal"]),
        Spacer(1, 6 * mm),
        table,
    ]
    doc.build(story, onFirstPage=_draw_page_number, onLaterPages=_draw_page_number)
    return buffer.getvalue()
