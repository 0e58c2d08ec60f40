"""Error taxonomy for the prediction pipeline."""
from __future__ import annotations


class AirQualifyError(RuntimeError):
    """Base error for failures visible to API callers."""


class ValidationError(AirQualifyError):
    """Raised when coordinates are missing or invalid."""


class ModelNotReady(AirQualifyError):
    """Raised when inference is requested before the model finished loading."""


class InferenceError(AirQualifyError):
    """Raised when the model call itself fails."""


__all__ = ["AirQualifyError", "ValidationError", "ModelNotReady", "InferenceError"]
