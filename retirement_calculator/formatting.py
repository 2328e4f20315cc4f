"""Display helpers for report and API consumers."""


def format_number_with_commas(value: float) -> str:
    """Two decimals with thousands separators, e.g. 1234567.89 -> '1,234,567.89'."""
    return f"{value:,.2f}"
