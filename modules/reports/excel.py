from io import BytesIO
from typing import Any, Dict, List

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter


def _create_styles():
    """Create reusable style definitions."""
    thin_border = Side(style="thin", color="000000")
    return {
        "title_font": Font(bold=True, size=14),
        "section_font": Font(bold=True, size=11),
        "header_font": Font(bold=True, size=10),
        "header_fill": PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid"),
        "loss_fill": PatternFill(start_color="FCE4D6", end_color="FCE4D6", fill_type="solid"),
        "total_font": Font(bold=True),
        "border": Border(left=thin_border, right=thin_border, top=thin_border, bottom=thin_border),
        "center_align": Alignment(horizontal="center", vertical="center"),
        "right_align": Alignment(horizontal="right", vertical="center"),
        "left_align": Alignment(horizontal="left", vertical="center"),
    }


def _write_header_row(ws, row: int, columns: List[str], styles: dict):
    for col_idx, col_name in enumerate(columns, start=1):
        cell = ws.cell(row=row, column=col_idx, value=col_name)
        cell.font = styles["header_font"]
        cell.fill = styles["header_fill"]
        cell.border = styles["border"]
        cell.alignment = styles["center_align"]


def _write_data_row(ws, row: int, values: List[Any], styles: dict, alignments: List[str] = None):
    for col_idx, value in enumerate(values, start=1):
        cell = ws.cell(row=row, column=col_idx, value=value)
        cell.border = styles["border"]
        if alignments and col_idx <= len(alignments):
            cell.alignment = styles.get(f"{alignments[col_idx - 1]}_align", styles["left_align"])


def _set_column_widths(ws, widths: List[int]):
    for col_idx, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = width


def _format_currency(value: float) -> str:
    if value is None:
        return "-"
    return f"{value:,.2f}"


def _write_summary_sheet(ws, report: Dict[str, Any], styles: dict):
    ws.cell(row=1, column=1, value="SALES REPORT").font = styles["title_font"]
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=5)

    current_row = 3
    summary = [
        ("Period:", f"{report['period_start']} to {report['period_end']}"),
        ("Completed orders:", report["total_orders"]),
        ("Gross sales:", _format_currency(report["total_gross"])),
        ("Expenses:", _format_currency(report["total_expenses"])),
        ("Net:", _format_currency(report["total_net"])),
    ]
    for label, value in summary:
        ws.cell(row=current_row, column=1, value=label).font = Font(bold=True)
        ws.cell(row=current_row, column=2, value=value)
        current_row += 1

    current_row += 1
    ws.cell(row=current_row, column=1, value="DAILY BREAKDOWN").font = styles["section_font"]
    current_row += 1

    _write_header_row(ws, current_row, ["Date", "Orders", "Gross", "Expenses", "Net"], styles)
    current_row += 1

    alignments = ["center", "center", "right", "right", "right"]
    for day in report["daily_data"]:
        values = [
            str(day["date"]),
            day["order_count"],
            _format_currency(day["total_gross"]),
            _format_currency(day["total_expenses"]),
            _format_currency(day["total_net"]),
        ]
        _write_data_row(ws, current_row, values, styles, alignments)
        if day["total_net"] < 0:
            for col in range(1, 6):
                ws.cell(row=current_row, column=col).fill = styles["loss_fill"]
        current_row += 1

    totals = [
        "TOTAL",
        report["total_orders"],
        _format_currency(report["total_gross"]),
        _format_currency(report["total_expenses"]),
        _format_currency(report["total_net"]),
    ]
    _write_data_row(ws, current_row, totals, styles, alignments)
    for col in range(1, 6):
        ws.cell(row=current_row, column=col).font = styles["total_font"]

    _set_column_widths(ws, [20, 22, 16, 16, 16])


def _write_top_products_sheet(ws, products: List[Dict[str, Any]], styles: dict):
    columns = ["#", "Product", "Variant", "SKU", "Category", "Qty sold", "Revenue", "Orders"]
    _write_header_row(ws, 1, columns, styles)
    alignments = ["center", "left", "left", "left", "left", "right", "right", "right"]
    for index, product in enumerate(products, start=1):
        values = [
            index,
            product["product_name"],
            product.get("variant_name") or "-",
            product.get("variant_sku") or product.get("product_sku") or "-",
            product.get("category_name") or "-",
            product["total_quantity_sold"],
            _format_currency(product["total_revenue"]),
            product["order_count"],
        ]
        _write_data_row(ws, index + 1, values, styles, alignments)
    _set_column_widths(ws, [6, 28, 18, 16, 18, 10, 14, 10])


def build_sales_report_excel(report: Dict[str, Any], products: List[Dict[str, Any]]) -> BytesIO:
    """Workbook with the sales summary and a top-products sheet."""
    wb = Workbook()
    styles = _create_styles()

    summary_ws = wb.active
    summary_ws.title = "Sales"
    _write_summary_sheet(summary_ws, report, styles)

    _write_top_products_sheet(wb.create_sheet("Top Products"), products, styles)

    stream = BytesIO()
    wb.save(stream)
    stream.seek(0)
    return stream
