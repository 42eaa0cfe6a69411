"""Output formatters (JSON, text)."""

from bdscan.export.json_out import export_json, scan_to_dict
from bdscan.export.text_report import format_pts, text_report
