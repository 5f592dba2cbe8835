from .config import ComparisonConfig
from .pipeline import ComparisonPipeline, ComparisonResult

__all__ = ["ComparisonConfig", "ComparisonPipeline", "ComparisonResult"]
