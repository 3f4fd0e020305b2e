"""Core package: provides models, errors, settings, and shared utilities."""

from .errors import AssistantError, EmptyInputError, JobTimeoutError, RemoteCallError  # noqa: F401
from .models import ExtractionResult, TransactionRecord  # noqa: F401
from .settings import Settings  # noqa: F401
from .utils import format_report_date, get_logger, normalize  # noqa: F401
