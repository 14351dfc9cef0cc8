"""
Simple report generation for PlyCut layouts.
Creates plain text and CSV reports from a LayoutResult.
"""

import csv
import io

from data_models import LayoutResult
from utils import format_area, format_percentage


def generate_cutting_layout_text(result: LayoutResult, job_name: str = "") -> str:
    """
    Generate text-based cutting layout report.

    Args:
        result: Finished layout
        job_name: Job name to include in report header

    Returns:
        Formatted text report
    """
    report_lines = []

    if job_name:
        report_lines.append(f"CUTTING LAYOUT REPORT - JOB: {job_name}")
    else:
        report_lines.append("CUTTING LAYOUT REPORT")

    report_lines.append("=" * 60)
    report_lines.append("")

    board = result.board_dimensions
    settings = result.settings_used

    report_lines.append("SUMMARY:")
    report_lines.append(f"Board Size: {board.width_mm}mm x {board.length_mm}mm")
    report_lines.append(f"Kerf: {settings.kerf_mm}mm, Edge Trim: {settings.edge_trim_mm}mm")
    report_lines.append(f"Boards Used: {result.boards_used}")
    report_lines.append(f"Pieces Placed: {len(result.placed_pieces)}")
    report_lines.append(f"Requested Area: {format_area(result.total_pieces_area_mm2)}")
    report_lines.append(f"Placed Area: {format_area(result.total_placed_piece_area_mm2)}")
    report_lines.append(f"Waste: {format_percentage(result.waste_percentage)}")
    report_lines.append("")

    if result.errors:
        report_lines.append("ERRORS:")
        report_lines.extend(f"  {error}" for error in result.errors)
        report_lines.append("")

    if result.warnings:
        report_lines.append("WARNINGS:")
        report_lines.extend(f"  {warning}" for warning in result.warnings)
        report_lines.append("")

    for index in range(result.boards_used):
        pieces = result.pieces_on_board(index)
        report_lines.append(f"BOARD {index + 1}")
        report_lines.append(f"Utilization: {format_percentage(result.board_utilization_percentage(index))}")
        report_lines.append(f"Pieces Count: {len(pieces)}")
        report_lines.append("")

        if pieces:
            report_lines.append("PIECES ON BOARD:")
            report_lines.append("Piece".ljust(24) + "Dimensions".ljust(18) + "Position".ljust(18) + "Notes")
            report_lines.append("-" * 70)

            for piece in pieces:
                label = str(piece.name or piece.id)[:23]
                dimensions = f"{piece.placed_width_mm:g}x{piece.placed_length_mm:g}"
                position = f"({piece.x:.0f},{piece.y:.0f})"
                notes = "Rotated" if piece.is_rotated else ""

                report_lines.append(
                    label.ljust(24) +
                    dimensions.ljust(18) +
                    position.ljust(18) +
                    notes
                )

        report_lines.append("")
        report_lines.append("-" * 60)
        report_lines.append("")

    if result.unplaced_pieces:
        report_lines.append("UNPLACED PIECES:")
        for piece in result.unplaced_pieces:
            report_lines.append(f"  {piece.name or piece.id} ({piece.width_mm:g}x{piece.length_mm:g}, "
                                f"qty {piece.quantity})")
        report_lines.append("")

    if result.usable_scrap:
        report_lines.append("USABLE SCRAP:")
        for scrap in result.usable_scrap:
            report_lines.append(f"  Board {scrap.board_index + 1}: {scrap.width:g}x{scrap.length:g} "
                                f"at ({scrap.x:.0f},{scrap.y:.0f}) - {format_area(scrap.area_mm2)}")

    return "\n".join(report_lines)


def generate_cutlist_csv(result: LayoutResult, job_name: str = "") -> str:
    """
    Generate CSV cut list with one row per placed piece.

    Returns:
        CSV content as string
    """
    output = io.StringIO()

    if job_name:
        output.write(f"# PlyCut Layout - Job: {job_name}\n")
    else:
        output.write("# PlyCut Layout\n")

    output.write(f"# Boards Used: {result.boards_used}\n")
    output.write(f"# Waste: {result.waste_percentage:.2f}%\n")
    output.write(f"# Unplaced Piece Types: {len(result.unplaced_pieces)}\n")
    output.write("#\n")

    writer = csv.writer(output)
    writer.writerow([
        'Piece ID', 'Name', 'Board', 'Placed Width (mm)', 'Placed Length (mm)',
        'X Position (mm)', 'Y Position (mm)', 'Rotated'
    ])

    for piece in result.placed_pieces:
        writer.writerow([
            piece.id,
            piece.name,
            piece.board_index + 1,
            piece.placed_width_mm,
            piece.placed_length_mm,
            piece.x,
            piece.y,
            'Yes' if piece.is_rotated else 'No',
        ])

    return output.getvalue()


def generate_scrap_csv(result: LayoutResult) -> str:
    """
    Generate CSV list of usable scrap, largest first.

    Returns:
        CSV content as string
    """
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(['Board', 'X Position (mm)', 'Y Position (mm)', 'Width (mm)', 'Length (mm)', 'Area (mm2)'])

    for scrap in result.usable_scrap:
        writer.writerow([
            scrap.board_index + 1,
            scrap.x,
            scrap.y,
            scrap.width,
            scrap.length,
            scrap.area_mm2,
        ])

    return output.getvalue()
