from .dashboard import build_dashboard
from .drilldown import ColumnDrilldown

__all__ = ["build_dashboard", "ColumnDrilldown"]
