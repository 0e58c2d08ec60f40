"""ONNX model wrapper with an explicit readiness state."""
from __future__ import annotations

import enum
import logging
import threading
from pathlib import Path
from typing import Callable, Optional, Tuple

import numpy as np
import onnxruntime

from ..abstractions import ModelSession
from ..entities import MeasurementSet
from ..errors import InferenceError, ModelNotReady


logger = logging.getLogger(__name__)

SessionLoader = Callable[[], ModelSession]


class ModelState(str, enum.Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


def onnx_session_loader(model_path: str | Path) -> SessionLoader:
    path = Path(model_path)

    def load() -> ModelSession:
        if not path.exists():
            raise FileNotFoundError(f"Model file not found: {path}")
        return onnxruntime.InferenceSession(str(path), providers=["CPUExecutionProvider"])

    return load


class InferenceAdapter:
    """Turn a :class:`MeasurementSet` into an AQI using the loaded model.

    The model is loaded once, either synchronously with :meth:`load` or in a
    background thread with :meth:`start_loading`.  Until loading succeeds every
    :meth:`predict` call raises :class:`ModelNotReady`; there is no fallback
    AQI.
    """

    INPUT_NAME = "float_input"

    def __init__(
        self,
        loader: SessionLoader,
        *,
        input_name: str = INPUT_NAME,
        output_name: Optional[str] = None,
    ) -> None:
        self._loader = loader
        self._input_name = input_name
        self._output_name = output_name
        self._session: Optional[ModelSession] = None
        self._state = ModelState.LOADING
        self._error: Optional[BaseException] = None
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def from_path(cls, model_path: str | Path, **kwargs) -> "InferenceAdapter":
        return cls(onnx_session_loader(model_path), **kwargs)

    @property
    def state(self) -> ModelState:
        return self._state

    def load(self) -> ModelState:
        with self._lock:
            if self._state is ModelState.READY:
                return self._state
            try:
                session = self._loader()
                output_name = self._output_name or session.get_outputs()[0].name
            except Exception as exc:  # noqa: BLE001 - surfaced through ModelNotReady
                logger.exception("Failed to load model")
                self._error = exc
                self._state = ModelState.FAILED
                return self._state
            self._session = session
            self._output_name = output_name
            self._error = None
            self._state = ModelState.READY
        logger.info("Model loaded, output tensor %r", output_name)
        return self._state

    def start_loading(self) -> threading.Thread:
        """Start the one-time background load; later calls return the same thread."""
        with self._lock:
            if self._thread is None:
                self._thread = threading.Thread(target=self.load, name="model-loader", daemon=True)
                self._thread.start()
            return self._thread

    def predict(self, measurements: MeasurementSet) -> float:
        session, output_name = self._require_ready()
        features = np.asarray([measurements.as_features()], dtype=np.float32)
        try:
            outputs = session.run([output_name], {self._input_name: features})
        except Exception as exc:
            raise InferenceError(f"inference failed: {exc}") from exc
        try:
            return float(np.asarray(outputs[0]).ravel()[0])
        except (IndexError, TypeError, ValueError) as exc:
            raise InferenceError("model returned no usable output") from exc

    def _require_ready(self) -> Tuple[ModelSession, str]:
        state = self._state
        if state is ModelState.FAILED:
            raise ModelNotReady(f"Model failed to load: {self._error}")
        if state is not ModelState.READY or self._session is None or self._output_name is None:
            raise ModelNotReady("Model not loaded")
        return self._session, self._output_name


__all__ = ["InferenceAdapter", "ModelState", "SessionLoader", "onnx_session_loader"]
