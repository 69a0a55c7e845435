"""
Export package
"""

from src.export.csv_export import COLUMNS, export_filename, to_delimited_text, write_export

__all__ = [
    "COLUMNS",
    "export_filename",
    "to_delimited_text",
    "write_export",
]
