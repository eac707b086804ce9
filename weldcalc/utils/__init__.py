"""
Utilities package for the welding consumables calculator.

Cross-cutting helpers only (logging, decimal formatting); no domain rules.
"""

from weldcalc.utils.logging import configure_logging, get_logger
from weldcalc.utils.numbers import format_decimal, numeric_prefix, round_half_up

__all__ = [
    "configure_logging",
    "get_logger",
    "format_decimal",
    "numeric_prefix",
    "round_half_up",
]
