from io import BytesIO
from datetime import datetime
from typing import List
import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter, landscape
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from schemas.analytics import Analytics, ClassifiedItem

ITEM_COLUMNS = [
    ("Item", "name"),
    ("SKU", "sku"),
    ("Category", "category"),
    ("Qty", "quantity"),
    ("Sold", "quantity_sold"),
    ("Unit Price", "unit_price"),
    ("Value", "total_value"),
    ("Revenue", "revenue"),
    ("Class", "value_class"),
    ("Dead Stock", "is_dead_stock"),
]


def _cell(item: ClassifiedItem, attr: str):
    value = getattr(item, attr)
    if attr == "value_class":
        return value.value
    if attr == "is_dead_stock":
        return "Yes" if value else "No"
    return value

def _format_turnover(analytics: Analytics) -> str:
    if isinstance(analytics.turnover_ratio, str):
        return analytics.turnover_ratio
    return f"{analytics.turnover_ratio:.1f}x"

def summary_rows(analytics: Analytics) -> List[List[str]]:
    return [
        ["Total Items", str(analytics.total_items)],
        ["Total Value", f"{analytics.total_value:,.2f}"],
        ["Low Stock Items", str(analytics.low_stock_count)],
        ["Dead Stock Items", str(analytics.dead_stock_count)],
        ["Turnover Ratio", _format_turnover(analytics)],
        ["Value Metric", analytics.value_metric.value],
        ["Class A / B / C", " / ".join(str(analytics.abc_distribution.get(c, 0)) for c in "ABC")],
    ]


def generate_pdf_report(items: List[ClassifiedItem], analytics: Analytics, generated_at: datetime) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(letter),
        rightMargin=36,
        leftMargin=36,
        topMargin=36,
        bottomMargin=36
    )
    elements = []
    styles = getSampleStyleSheet()

    title_style = ParagraphStyle(
        'TitleStyle',
        parent=styles['Title'],
        fontSize=16,
        textColor=colors.navy,
        spaceAfter=12
    )

    heading_style = ParagraphStyle(
        'HeadingStyle',
        parent=styles['Heading3'],
        fontSize=12,
        textColor=colors.navy,
        spaceBefore=12,
        spaceAfter=6
    )

    elements.append(Paragraph("Inventory ABC Report", title_style))
    elements.append(Paragraph(f"Generated {generated_at.strftime('%d %B %Y %H:%M')} UTC", styles['Normal']))
    elements.append(Spacer(1, 20))

    elements.append(Paragraph("Summary", heading_style))
    summary_table = Table(summary_rows(analytics), colWidths=[180, 180])
    summary_table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
    ]))
    elements.append(summary_table)

    elements.append(Paragraph("Items", heading_style))
    rows = [[header for header, _ in ITEM_COLUMNS]]
    for item in items:
        row = []
        for _, attr in ITEM_COLUMNS:
            value = _cell(item, attr)
            row.append(f"{value:,.2f}" if isinstance(value, float) else str(value))
        rows.append(row)

    items_table = Table(rows, repeatRows=1)
    items_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.lightgrey),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 8),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ('ALIGN', (3, 1), (7, -1), 'RIGHT'),
    ]))
    elements.append(items_table)

    doc.build(elements)
    pdf_data = buffer.getvalue()
    buffer.close()
    return pdf_data


def generate_excel_report(items: List[ClassifiedItem], analytics: Analytics, generated_at: datetime) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Inventory"

    title_font = Font(name='Arial', size=14, bold=True, color='000080')
    header_font = Font(name='Arial', size=11, bold=True)
    normal_font = Font(name='Arial', size=10)
    header_fill = PatternFill(start_color='E0E0E0', end_color='E0E0E0', fill_type='solid')
    border = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    ws["A1"] = "Inventory ABC Report"
    ws["A1"].font = title_font
    ws["A2"] = f"Generated {generated_at.strftime('%d %B %Y %H:%M')} UTC"

    current_row = 4
    for label, value in summary_rows(analytics):
        ws.cell(row=current_row, column=1, value=label).font = header_font
        ws.cell(row=current_row, column=2, value=value).font = normal_font
        current_row += 1

    current_row += 1
    for col, (header, _) in enumerate(ITEM_COLUMNS, start=1):
        cell = ws.cell(row=current_row, column=col, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.border = border
        cell.alignment = Alignment(horizontal='center')

    for item in items:
        current_row += 1
        for col, (_, attr) in enumerate(ITEM_COLUMNS, start=1):
            cell = ws.cell(row=current_row, column=col, value=_cell(item, attr))
            cell.font = normal_font
            cell.border = border
            if attr in ("unit_price", "total_value", "revenue"):
                cell.number_format = '#,##0.00'

    ws.column_dimensions['A'].width = 30
    for letter_ in "BCDEFGHIJ":
        ws.column_dimensions[letter_].width = 14

    buffer = BytesIO()
    wb.save(buffer)
    excel_data = buffer.getvalue()
    buffer.close()
    return excel_data
