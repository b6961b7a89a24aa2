"""Downloadable reports: finance ledger workbook and excess claim document."""

import io
import os

import pandas as pd
from docx import Document
from docx.image.exceptions import UnrecognizedImageError
from docx.shared import Inches

from services.documents import upload_folder

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
DOCX_MIMETYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png")


def finance_workbook(account, entries, summary):
    df_summary = pd.DataFrame([
        {"Item": "Account", "Value": f"{account.name} <{account.email}>"},
        {"Item": "Total credit", "Value": float(summary["total_credit"])},
        {"Item": "Total debit", "Value": float(summary["total_debit"])},
        {"Item": "Balance", "Value": float(summary["balance"])},
    ])

    df_entries = pd.DataFrame([{
        "ID": f.id,
        "Date": f.created_at.strftime("%d/%m/%Y %H:%M") if f.created_at else "",
        "Type": f.type,
        "Amount": float(f.amount),
        "Description": f.description or "",
        "Reference": f.reference or "",
        "Contract": f.booking.contract_id if f.booking else "",
        "Excess": f.excess_id or "",
        "Card": f.bank_card.masked_number if f.bank_card else "",
    } for f in entries], columns=["ID", "Date", "Type", "Amount", "Description", "Reference", "Contract", "Excess", "Card"])

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="xlsxwriter") as writer:
        df_summary.to_excel(writer, index=False, sheet_name="Summary")
        df_entries.to_excel(writer, index=False, sheet_name="Ledger")

        workbook = writer.book
        header_format = workbook.add_format({"bold": True, "bg_color": "#CCE5FF", "border": 1})
        for sheet_name, df in (("Summary", df_summary), ("Ledger", df_entries)):
            worksheet = writer.sheets[sheet_name]
            for col_num, value in enumerate(df.columns.values):
                worksheet.write(0, col_num, value, header_format)

    output.seek(0)
    return output


def excess_document(excess):
    booking = excess.booking
    customer = booking.account

    doc = Document()
    doc.add_heading("Cardoo", 0)
    doc.add_heading(f"Excess claim #{excess.id}", level=1)

    doc.add_heading("1. Claim", level=2)
    for label, value in [
        ("Type", excess.type),
        ("Amount", excess.amount),
        ("Status", excess.status),
        ("Description", excess.description),
        ("Notes", excess.notes),
        ("Filed on", excess.created_at.strftime("%d/%m/%Y") if excess.created_at else None),
    ]:
        doc.add_paragraph(f"{label}: {value if value is not None else ''}")

    doc.add_heading("2. Booking", level=2)
    doc.add_paragraph(f"Contract: {booking.contract_id}")
    doc.add_paragraph(f"Customer: {customer.name} ({customer.email})")
    doc.add_paragraph(f"Rental: {booking.start_date:%d/%m/%Y} - {booking.end_date:%d/%m/%Y} ({booking.rental_type})")

    doc.add_heading("3. Documents", level=2)
    folder = upload_folder()
    for doc_info in excess.documents():
        doc.add_paragraph(doc_info["label"] + ":")
        filename = doc_info["filename"]
        if not filename:
            doc.add_paragraph("Not provided")
            continue
        path = os.path.join(folder, filename)
        if not os.path.exists(path):
            doc.add_paragraph("(File missing)")
            continue
        if not filename.lower().endswith(IMAGE_EXTENSIONS):
            doc.add_paragraph(filename)
            continue
        try:
            doc.add_picture(path, width=Inches(2))
        except UnrecognizedImageError:
            doc.add_paragraph(f"{filename} (unreadable image)")

    doc.add_heading("4. History", level=2)
    table = doc.add_table(rows=1, cols=4)
    header = table.rows[0].cells
    header[0].text, header[1].text, header[2].text, header[3].text = "Date", "Action", "By", "Details"
    for action in excess.actions:
        row = table.add_row().cells
        row[0].text = action.created_at.strftime("%d/%m/%Y %H:%M") if action.created_at else ""
        row[1].text = action.description
        row[2].text = action.account.name if action.account else ""
        row[3].text = action.details or ""

    buffer = io.BytesIO()
    doc.save(buffer)
    buffer.seek(0)
    return buffer
