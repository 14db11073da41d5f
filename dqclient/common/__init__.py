from .export import export_report, parse_report, read_report, write_report

__all__ = ["export_report", "parse_report", "read_report", "write_report"]
