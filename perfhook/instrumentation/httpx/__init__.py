from .instrumentation import HttpxInstrumentation

__all__ = ["HttpxInstrumentation"]
