"""Template evaluation and output normalization."""

from .evaluator import AirspeedEvaluator, Evaluator
from .processor import VTLProcessor, normalize_output

__all__ = ["AirspeedEvaluator", "Evaluator", "VTLProcessor", "normalize_output"]
