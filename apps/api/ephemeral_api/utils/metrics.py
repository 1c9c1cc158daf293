"""Prometheus metrics."""

from prometheus_client import Counter, Gauge, Histogram

# Intake metrics
transactions_submitted = Counter(
    "ephemeral_transactions_submitted_total",
    "Total transactions accepted into the black box",
    ["asset"],
)

intake_queue_size = Gauge(
    "ephemeral_intake_queue_size",
    "Entries currently held in the black box",
)

# Block production metrics
blocks_processed = Counter(
    "ephemeral_blocks_processed_total",
    "Total transactions folded into the state commitment chain",
)

processing_failures = Counter(
    "ephemeral_processing_failures_total",
    "State transitions that failed and left the transaction unprocessed",
    ["reason"],
)

block_height = Gauge(
    "ephemeral_block_height",
    "Current chain head block height",
)

processing_duration = Histogram(
    "ephemeral_processing_duration_seconds",
    "Duration of a single state transition including persistence",
)

# Effect proof metrics
effect_proofs_generated = Counter(
    "ephemeral_effect_proofs_generated_total",
    "Total effect proofs issued",
)

effect_proofs_rejected = Counter(
    "ephemeral_effect_proofs_rejected_total",
    "Effect proof requests rejected",
    ["reason"],
)

# Retention metrics
transactions_swept = Counter(
    "ephemeral_transactions_swept_total",
    "Processed transactions purged from the black box",
    ["trigger"],
)

# HTTP metrics
request_duration = Histogram(
    "ephemeral_http_request_duration_seconds",
    "HTTP request duration",
    ["method", "path"],
)
