"""
Static message tables: per-level templates, padding fragments, stack-trace parts
and the vocabularies behind each placeholder.
"""
import json
from string import Formatter
from types import MappingProxyType

from .errors import PoolBuildError

LEVELS = ('INFO', 'DEBUG', 'WARN', 'ERROR')

PLACEHOLDERS = ('USER', 'IP', 'TIME', 'SIZE', 'COUNT', 'TABLE', 'ID', 'SERVICE', 'STATUS')

_DEFAULT_TEMPLATES = {
    'INFO': (
        "User {USER} logged in successfully from {IP}. Session initialized with {COUNT} cached "
        "permissions, profile loaded from table {TABLE} in {TIME}ms. Request {ID} routed through "
        "{SERVICE} with status {STATUS}.",
        "Processed batch {ID} for {SERVICE}: {COUNT} records written to {TABLE} ({SIZE}) in {TIME}ms. "
        "Upstream caller {USER} at {IP} acknowledged with status {STATUS}.",
        "HTTP GET /api/v1/orders?user={USER} completed with status {STATUS} in {TIME}ms, response "
        "size {SIZE}, client {IP}. Served by {SERVICE}, {COUNT} rows read from {TABLE}, trace {ID}.",
        "Scheduled job {ID} on {SERVICE} finished: compacted {COUNT} segments of {TABLE} reclaiming "
        "{SIZE} in {TIME}ms. Triggered by {USER} from {IP}, final status {STATUS}.",
        "Cache refresh for {TABLE} completed on {SERVICE}: {COUNT} keys reloaded ({SIZE}) in {TIME}ms. "
        "Invalidation request {ID} issued by {USER} from {IP} returned {STATUS}.",
        "Payment authorization {ID} for {USER} approved by {SERVICE} in {TIME}ms with status {STATUS}. "
        "Ledger table {TABLE} updated with {COUNT} entries, payload {SIZE}, origin {IP}.",
    ),
    'DEBUG': (
        "Entering handler for request {ID} on {SERVICE}: user={USER} remote={IP} payload={SIZE} "
        "expected_rows={COUNT} target_table={TABLE} timeout={TIME}ms last_status={STATUS}.",
        "Query plan for {TABLE} chosen by {SERVICE}: index scan over {COUNT} partitions, estimated "
        "{SIZE} read, budget {TIME}ms. Request {ID} from {USER} at {IP}, previous status {STATUS}.",
        "Connection pool stats on {SERVICE}: {COUNT} active, lease for {USER} ({IP}) granted after "
        "{TIME}ms, buffer {SIZE}, statement {ID} bound to {TABLE}, driver status {STATUS}.",
        "Deserialized message {ID} ({SIZE}) from {IP} for {USER}: {COUNT} fields mapped onto {TABLE} "
        "schema by {SERVICE} in {TIME}ms, validation status {STATUS}.",
    ),
    'WARN': (
        "Slow query detected on {SERVICE}: statement {ID} against {TABLE} took {TIME}ms scanning "
        "{COUNT} rows ({SIZE}). Caller {USER} from {IP}, response status {STATUS}.",
        "Retrying request {ID} to {SERVICE} after status {STATUS}: attempt {COUNT}, backoff {TIME}ms. "
        "User {USER} at {IP} still waiting, pending write of {SIZE} to {TABLE}.",
        "Memory pressure on {SERVICE}: heap usage grew by {SIZE} while serving {USER} ({IP}); {COUNT} "
        "objects from {TABLE} retained, GC pause {TIME}ms, request {ID} status {STATUS}.",
        "Rate limit approaching for {USER} on {SERVICE}: {COUNT} requests in window, last from {IP} "
        "took {TIME}ms, payload {SIZE}, table {TABLE}, request {ID} returned {STATUS}.",
    ),
    'ERROR': (
        "Failed to process request {ID} on {SERVICE}: transaction against {TABLE} rolled back after "
        "{TIME}ms with status {STATUS}. User {USER} from {IP} lost {COUNT} pending writes ({SIZE}).",
        "Database connection to {TABLE} lost on {SERVICE} while serving {USER} ({IP}): {COUNT} "
        "in-flight statements aborted after {TIME}ms, request {ID} failed with status {STATUS}, "
        "buffered {SIZE} discarded.",
        "Unhandled exception in {SERVICE} handling request {ID} for {USER} from {IP}: payload {SIZE} "
        "rejected after {TIME}ms, {COUNT} rows in {TABLE} left locked, status {STATUS}.",
        "Upstream timeout calling {SERVICE} for {USER} at {IP}: request {ID} exceeded {TIME}ms, "
        "{COUNT} retries exhausted, partial write of {SIZE} to {TABLE}, status {STATUS}.",
    ),
}

TEMPLATES = MappingProxyType(_DEFAULT_TEMPLATES)

# Each fragment stays well under 150 characters once filled in.
DETAIL_FRAGMENTS = (
    " Context: user={USER} ip={IP} request={ID} service={SERVICE}.",
    " Metrics: latency={TIME}ms rows={COUNT} bytes={SIZE} status={STATUS}.",
    " Storage: table={TABLE} affected={COUNT} flush={TIME}ms size={SIZE}.",
    " Network: peer={IP} upstream={SERVICE} rtt={TIME}ms correlation={ID}.",
    " Audit: actor={USER} action=write target={TABLE} outcome={STATUS}.",
    " Queue: depth={COUNT} oldest={TIME}ms consumer={SERVICE} message={ID}.",
)

EXCEPTIONS = (
    'java.sql.SQLTransientConnectionException',
    'java.util.concurrent.TimeoutException',
    'java.lang.IllegalStateException',
    'java.io.IOException',
    'java.lang.NullPointerException',
    'org.apache.kafka.common.errors.RecordTooLargeException',
)

STACK_PACKAGES = ('com.app.service', 'com.app.repository', 'com.app.controller',
                  'com.app.client', 'com.app.middleware', 'com.zaxxer.hikari.pool')

STACK_CLASSES = ('OrderService', 'UserRepository', 'PaymentClient', 'AuthMiddleware',
                 'HikariPool', 'InventoryController', 'SessionManager', 'LedgerWriter')

STACK_METHODS = ('process', 'findByUserId', 'charge', 'doFilter', 'getConnection',
                 'handleRequest', 'commit', 'refresh', 'execute', 'validate')

TABLES = ('orders', 'users', 'payments', 'sessions', 'inventory', 'audit_log',
          'shipments', 'invoices', 'events', 'accounts')

SERVICES = ('api-gateway', 'auth-service', 'user-service', 'payment-service',
            'order-service', 'inventory-service', 'notification-service', 'search-service')

STATUSES = ('200', '201', '204', '400', '401', '403', '404', '409', '429',
            '500', '502', '503', '504', 'OK', 'FAILED', 'TIMEOUT')


def validate_templates(templates):
    """Return ``templates`` as an immutable per-level table, or raise PoolBuildError."""
    if not templates:
        raise PoolBuildError("Message template table is missing or empty")
    table = {}
    for level in LEVELS:
        entries = templates.get(level)
        if not entries:
            raise PoolBuildError(f"No message templates defined for level {level}")
        if not isinstance(entries, (list, tuple)) or not all(isinstance(t, str) and t for t in entries):
            raise PoolBuildError(f"Templates for level {level} must be a list of non-empty strings")
        for template in entries:
            _check_placeholders(level, template)
        table[level] = tuple(entries)
    return MappingProxyType(table)


def load_templates(path):
    """Read a per-level template table from a JSON file."""
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise PoolBuildError(f"Could not load message templates from {path}: {e}") from e
    if not isinstance(data, dict):
        raise PoolBuildError(f"Template file {path} must hold an object keyed by log level")
    return validate_templates(data)


def _check_placeholders(level, template):
    try:
        fields = [name for _, name, _, _ in Formatter().parse(template) if name is not None]
    except ValueError as e:
        raise PoolBuildError(f"Malformed {level} template {template!r}: {e}") from e
    unknown = set(fields) - set(PLACEHOLDERS)
    if unknown:
        raise PoolBuildError(f"Unknown placeholders {sorted(unknown)} in {level} template {template!r}")
