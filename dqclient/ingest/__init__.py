from .controller import IngestionController

__all__ = ["IngestionController"]
