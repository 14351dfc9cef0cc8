"""
Excel report generation for PlyCut layouts.
"""

import io
import logging

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from data_models import LayoutResult

logger = logging.getLogger(__name__)

HEADER_FILL = PatternFill(start_color="CCCCCC", end_color="CCCCCC", fill_type="solid")


def _write_headers(ws, headers):
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = Font(bold=True)
        cell.fill = HEADER_FILL


def create_summary_tab(ws, result: LayoutResult, job_name: str):
    """Write the headline numbers of a run."""
    title = f"PlyCut Layout Summary - {job_name}" if job_name else "PlyCut Layout Summary"
    ws['A1'] = title
    ws['A1'].font = Font(size=16, bold=True)
    ws.merge_cells('A1:D1')

    board = result.board_dimensions
    settings = result.settings_used
    metrics = [
        ("Board Size (mm)", f"{board.width_mm:g}x{board.length_mm:g}"),
        ("Kerf (mm)", settings.kerf_mm),
        ("Edge Trim (mm)", settings.edge_trim_mm),
        ("Boards Used", result.boards_used),
        ("Pieces Placed", len(result.placed_pieces)),
        ("Unplaced Piece Types", len(result.unplaced_pieces)),
        ("Requested Area (mm2)", result.total_pieces_area_mm2),
        ("Placed Area (mm2)", result.total_placed_piece_area_mm2),
        ("Board Area (mm2)", result.total_boards_area_mm2),
        ("Waste (%)", round(result.waste_percentage, 2)),
    ]

    row = 3
    for metric, value in metrics:
        ws[f'A{row}'] = metric
        ws[f'B{row}'] = value
        ws[f'A{row}'].font = Font(bold=True)
        row += 1

    for message in result.errors + result.warnings:
        row += 1
        ws[f'A{row}'] = message


def create_placed_pieces_tab(ws, result: LayoutResult):
    _write_headers(ws, ['Board', 'Piece ID', 'Name', 'Width (mm)', 'Length (mm)',
                        'X (mm)', 'Y (mm)', 'Rotated'])
    for row, piece in enumerate(result.placed_pieces, 2):
        ws.cell(row=row, column=1, value=piece.board_index + 1)
        ws.cell(row=row, column=2, value=piece.id)
        ws.cell(row=row, column=3, value=piece.name)
        ws.cell(row=row, column=4, value=piece.placed_width_mm)
        ws.cell(row=row, column=5, value=piece.placed_length_mm)
        ws.cell(row=row, column=6, value=piece.x)
        ws.cell(row=row, column=7, value=piece.y)
        ws.cell(row=row, column=8, value='Yes' if piece.is_rotated else 'No')


def create_unplaced_pieces_tab(ws, result: LayoutResult):
    _write_headers(ws, ['Piece ID', 'Name', 'Width (mm)', 'Length (mm)', 'Quantity', 'Grain'])
    for row, piece in enumerate(result.unplaced_pieces, 2):
        ws.cell(row=row, column=1, value=piece.id)
        ws.cell(row=row, column=2, value=piece.name)
        ws.cell(row=row, column=3, value=piece.width_mm)
        ws.cell(row=row, column=4, value=piece.length_mm)
        ws.cell(row=row, column=5, value=piece.quantity)
        ws.cell(row=row, column=6, value=piece.grain_direction)


def create_scrap_tab(ws, result: LayoutResult):
    _write_headers(ws, ['Board', 'X (mm)', 'Y (mm)', 'Width (mm)', 'Length (mm)', 'Area (mm2)'])
    for row, scrap in enumerate(result.usable_scrap, 2):
        ws.cell(row=row, column=1, value=scrap.board_index + 1)
        ws.cell(row=row, column=2, value=scrap.x)
        ws.cell(row=row, column=3, value=scrap.y)
        ws.cell(row=row, column=4, value=scrap.width)
        ws.cell(row=row, column=5, value=scrap.length)
        ws.cell(row=row, column=6, value=scrap.area_mm2)


def create_excel_report(result: LayoutResult, job_name: str = "") -> bytes:
    """
    Create an Excel workbook with summary, placements, unplaced pieces and scrap.

    Args:
        result: Finished layout
        job_name: Job name for the summary title

    Returns:
        xlsx file content
    """
    try:
        wb = Workbook()
        wb.remove(wb.active)

        create_summary_tab(wb.create_sheet("Summary", 0), result, job_name)
        create_placed_pieces_tab(wb.create_sheet("Placed Pieces", 1), result)
        create_unplaced_pieces_tab(wb.create_sheet("Unplaced Pieces", 2), result)
        create_scrap_tab(wb.create_sheet("Usable Scrap", 3), result)

        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    except Exception as e:
        logger.error(f"Excel generation failed: {e}")
        raise
