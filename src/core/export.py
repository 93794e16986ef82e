"""Tabular exports (CSV and Excel) of querysets."""
import csv
from io import BytesIO

import openpyxl
from django.http import HttpResponse
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _cell(obj, field):
    if callable(field):
        return field(obj)
    value = getattr(obj, field, "")
    return "" if value is None else value


def _rows(queryset, columns):
    for obj in queryset.iterator():
        yield [_cell(obj, field) for field, _ in columns]


def queryset_to_csv_response(queryset, columns, filename):
    """Convert a queryset to a CSV download.

    Args:
        queryset: Django QuerySet
        columns: list of (field_name_or_callable, header_label) tuples.
            A string is read with getattr(obj, field); a callable is
            called with the object.
        filename: download filename (without extension)
    """
    response = HttpResponse(content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = f'attachment; filename="{filename}.csv"'
    # UTF-8 BOM for Excel compatibility
    response.write("\ufeff")

    writer = csv.writer(response)
    writer.writerow([label for _, label in columns])
    for row in _rows(queryset, columns):
        writer.writerow([str(value) for value in row])
    return response


def queryset_to_xlsx_response(queryset, columns, filename, sheet_title="Export"):
    """Same contract as :func:`queryset_to_csv_response`, as an .xlsx workbook."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_title[:31]

    header_font = Font(bold=True, color="FFFFFF", size=11)
    header_fill = PatternFill(start_color="0F4C9A", end_color="0F4C9A", fill_type="solid")
    widths = []
    for col_num, (_, label) in enumerate(columns, 1):
        cell = ws.cell(row=1, column=col_num, value=label)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center", vertical="center")
        widths.append(len(label))

    for row_num, row in enumerate(_rows(queryset, columns), start=2):
        for col_num, value in enumerate(row, 1):
            ws.cell(row=row_num, column=col_num, value=value)
            widths[col_num - 1] = max(widths[col_num - 1], len(str(value)))

    for col_num, width in enumerate(widths, 1):
        ws.column_dimensions[get_column_letter(col_num)].width = min(width + 4, 50)

    buffer = BytesIO()
    wb.save(buffer)
    response = HttpResponse(buffer.getvalue(), content_type=XLSX_CONTENT_TYPE)
    response["Content-Disposition"] = f'attachment; filename="{filename}.xlsx"'
    return response
