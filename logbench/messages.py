"""
Builds the large ``log_message`` column.

Every choice is a hash of the row index with a per-decision salt, so a message
is fully determined by (row_index, log_level, template table).
"""
from .pools import scatter
from .templates import (
    DETAIL_FRAGMENTS,
    EXCEPTIONS,
    SERVICES,
    STACK_CLASSES,
    STACK_METHODS,
    STACK_PACKAGES,
    STATUSES,
    TABLES,
    TEMPLATES,
    validate_templates,
)

TARGET_LENGTH = 1500
MIN_LENGTH = 1350
MAX_LENGTH = 1650

STACK_TRACE_PERCENT = 70
MIN_STACK_DEPTH = 3
MAX_STACK_DEPTH = 8


def _size(row_index):
    kb = 1 + scatter(row_index, 4) % 1024
    return '1MB' if kb == 1024 else f"{kb}KB"


def _ip(row_index):
    h = scatter(row_index, 2)
    return f"192.168.{(h >> 8) & 0xFF}.{h & 0xFF}"


_PLACEHOLDER_VALUES = {
    'USER': lambda r: f"user_{10000 + scatter(r, 1) % 1000}",
    'IP': _ip,
    'TIME': lambda r: str(1 + scatter(r, 3) % 4999),
    'SIZE': _size,
    'COUNT': lambda r: str(1 + scatter(r, 5) % 999),
    'TABLE': lambda r: TABLES[scatter(r, 6) % len(TABLES)],
    'ID': lambda r: f"{scatter(r, 7):08x}",
    'SERVICE': lambda r: SERVICES[scatter(r, 8) % len(SERVICES)],
    'STATUS': lambda r: STATUSES[scatter(r, 9) % len(STATUSES)],
}


class _Placeholders(dict):
    """Lazily fills placeholder values for one row; repeated markers agree."""

    __slots__ = ('row_index',)

    def __init__(self, row_index):
        super().__init__()
        self.row_index = row_index

    def __missing__(self, key):
        value = self[key] = _PLACEHOLDER_VALUES[key](self.row_index)
        return value


def has_stack_trace(row_index):
    return scatter(row_index, 11) % 100 < STACK_TRACE_PERCENT


def stack_trace(row_index):
    """Synthetic Java-style trace: an exception line followed by 3-8 frames."""
    depth = MIN_STACK_DEPTH + scatter(row_index, 12) % (MAX_STACK_DEPTH - MIN_STACK_DEPTH + 1)
    exception = EXCEPTIONS[scatter(row_index, 13) % len(EXCEPTIONS)]
    lines = [f"\n{exception}: operation aborted"]
    for frame in range(depth):
        h = scatter(row_index, 20 + frame)
        package = STACK_PACKAGES[h % len(STACK_PACKAGES)]
        cls = STACK_CLASSES[(h >> 4) % len(STACK_CLASSES)]
        method = STACK_METHODS[(h >> 8) % len(STACK_METHODS)]
        line = 1 + (h >> 12) % 999
        lines.append(f"\n\tat {package}.{cls}.{method}({cls}.java:{line})")
    return ''.join(lines)


class MessageSynthesizer:
    """Template selection, placeholder substitution and length shaping."""

    def __init__(self, templates=None):
        self._templates = TEMPLATES if templates is None else validate_templates(templates)

    @property
    def templates(self):
        return self._templates

    def synthesize(self, row_index, log_level):
        try:
            choices = self._templates[log_level]
        except KeyError:
            raise ValueError(f"Unknown log level: {log_level!r}") from None

        values = _Placeholders(row_index)
        parts = [choices[scatter(row_index, 10) % len(choices)].format_map(values)]
        length = len(parts[0])

        if log_level == 'ERROR' and has_stack_trace(row_index):
            trace = stack_trace(row_index)
            parts.append(trace)
            length += len(trace)

        start = scatter(row_index, 14)
        n = 0
        while length < TARGET_LENGTH:
            fragment = DETAIL_FRAGMENTS[(start + n) % len(DETAIL_FRAGMENTS)].format_map(values)
            parts.append(fragment)
            length += len(fragment)
            n += 1

        message = ''.join(parts)
        if length > MAX_LENGTH:
            message = message[:MAX_LENGTH]
        return message
