from prometheus_client import Counter
from prometheus_client import Gauge

from testnetfaucet.domain.faucet.entities import DispatchOutcome

dispatch_outcomes_counter = Counter(
    "faucet_dispatch_outcomes",
    "Terminal dispatch outcomes by status and reason",
    ["status", "reason"],
)

in_flight_jobs_gauge = Gauge(
    "faucet_in_flight_jobs",
    "Admitted dispatch jobs that have not reached a terminal outcome",
)


def record_outcome(outcome: DispatchOutcome) -> None:
    reason = outcome.reason.value if outcome.reason else ""
    dispatch_outcomes_counter.labels(outcome.status.value, reason).inc()
