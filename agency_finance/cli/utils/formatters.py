"""Output formatting utilities for CLI."""

import json
from decimal import Decimal
from typing import Any, List, Optional

import click


def format_success(message: str) -> str:
    """Format a success message with green color."""
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    """Format an error message with red color."""
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    """Format a warning message with yellow color."""
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Format an info message with blue color."""
    return click.style(f"ℹ {message}", fg="blue")


def format_amount(value: Optional[Decimal], currency: Optional[str] = None) -> str:
    """Format a money amount with thousands separators.

    Args:
        value: Amount to format (None renders as "-")
        currency: Optional currency code appended to the amount

    Returns:
        Formatted amount such as "12,500 PKR"

    Example:
        >>> format_amount(Decimal("1234.50"), "USD")
        '1,234.50 USD'
        >>> format_amount(None)
        '-'
    """
    if value is None:
        return "-"
    text = f"{value:,}"
    return f"{text} {currency}" if currency else text


def format_json(data: Any) -> str:
    """Render report data as indented JSON; Decimals and dates become strings."""
    return json.dumps(data, indent=2, default=str)


def format_table(headers: List[str], rows: List[List[str]], max_width: int = 80) -> str:
    """Format data as a table.

    Args:
        headers: List of column headers
        rows: List of data rows (each row is a list of cell values)
        max_width: Maximum width for each column (default: 80)

    Returns:
        Formatted table as a string
    """
    if not headers:
        return ""

    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            if i < len(col_widths):
                col_widths[i] = max(col_widths[i], len(str(cell)))

    col_widths = [min(w, max_width) for w in col_widths]

    separator = "+" + "+".join("-" * (w + 2) for w in col_widths) + "+"

    header_row = (
        "|"
        + "|".join(f" {h:<{col_widths[i]}} " for i, h in enumerate(headers))
        + "|"
    )

    data_rows = []
    for row in rows:
        formatted_cells = []
        for i, cell in enumerate(row):
            if i < len(col_widths):
                cell_str = str(cell)[: col_widths[i]]
                formatted_cells.append(f" {cell_str:<{col_widths[i]}} ")
        data_rows.append("|" + "|".join(formatted_cells) + "|")

    table_lines = [separator, header_row, separator]
    if rows:
        table_lines.extend(data_rows)
        table_lines.append(separator)

    return "\n".join(table_lines)
