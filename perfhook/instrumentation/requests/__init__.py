from .instrumentation import RequestsInstrumentation

__all__ = ["RequestsInstrumentation"]
