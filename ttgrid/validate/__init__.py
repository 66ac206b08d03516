from .checks import coverage_violations, session_problem, validate_grid
from .report import format_validation_report, write_validation_report

__all__ = [
    "session_problem",
    "coverage_violations",
    "validate_grid",
    "format_validation_report",
    "write_validation_report",
]
