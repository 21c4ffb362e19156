"""Backend adapter for Microsoft SEAL through `tenseal.sealapi`.

Importing this package registers the "seal" backend when TenSEAL is
installed. Without it nothing is registered and the CLI reports the backend
as unavailable.
"""
from __future__ import annotations

import warnings

from ._util import try_import_sealapi

_available = try_import_sealapi() is not None

if _available:
    from . import backend as _backend  # noqa: F401
else:
    warnings.warn("sealbench_tenseal disabled: tenseal is not installed")

__all__ = ["_available"]
