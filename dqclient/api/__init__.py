from .client import AnalysisClient, resolve_base_url

__all__ = ["AnalysisClient", "resolve_base_url"]
