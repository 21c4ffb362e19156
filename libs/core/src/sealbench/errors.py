from __future__ import annotations

"""Exception types raised by the benchmark construction engine.

Every error here reflects a static configuration defect rather than an
operational fault, so nothing catches and retries them.
"""


class SealBenchError(RuntimeError):
    pass


class DuplicateParameterSetError(SealBenchError):
    """Raised when a parameter set is inserted into the cache twice."""

    def __init__(self, parms) -> None:
        super().__init__(f"duplicate parameter sets: {parms}")
        self.parms = parms


class MissingEnvironmentError(SealBenchError):
    """Raised when a parameter set was never built into the cache."""

    def __init__(self, parms) -> None:
        super().__init__(f"no environment cached for {parms}")
        self.parms = parms


class BackendUnavailableError(SealBenchError):
    pass


class HarnessArgumentError(SealBenchError):
    pass
