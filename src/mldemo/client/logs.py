import json
import logging
import sys
from typing import Any, Final

# Context attached to prediction log records via `extra={...}`, in the order
# it is emitted. Anything else on the record is ignored.
CONTEXT_FIELDS: Final[tuple[str, ...]] = (
    "path",
    "status",
    "duration_ms",
    "error_type",
    "error",
    "request_id",
    "method",
)


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line, keyed on the model domain.

    Every entry carries `domain` (null for records outside a prediction
    call) next to level, logger and message, so log lines from the four
    backends can be split without parsing the message. Known context fields
    follow when present. For records logged with a traceback, the exception
    class lands in `error_type` and the formatted traceback in `exc_info`.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "time_ms": int(record.created * 1000),
            "level": record.levelname,
            "logger": record.name,
            "domain": getattr(record, "domain", None),
            "msg": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                entry[field] = getattr(record, field)

        if record.exc_info and record.exc_info[0] is not None:
            entry.setdefault("error_type", record.exc_info[0].__name__)
            entry["exc_info"] = self.formatException(record.exc_info)

        # Survival labels are Korean; keep them readable.
        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logging(json_logs: bool = True, level: str = "INFO"):
    """
    Send all logging to a single stderr handler.

    stdout is left to the CLI's result output. Existing root handlers are
    replaced.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        JsonFormatter()
        if json_logs
        else logging.Formatter("%(levelname)s %(name)s %(message)s")
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)
