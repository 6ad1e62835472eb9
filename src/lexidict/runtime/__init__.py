"""Runtime support imported by generated dictionary modules.

Generated code depends on this package only; the compiler packages
(syntax, analysis, codegen) are never imported at runtime.

Python 3.13+.
"""

from lexidict.constants import MISSING_TRANSLATION

from .dispatch import DispatchBase
from .locale import LocaleBase, UnknownLocaleError

__all__ = ["MISSING_TRANSLATION", "DispatchBase", "LocaleBase", "UnknownLocaleError"]
