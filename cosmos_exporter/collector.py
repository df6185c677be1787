"""Request-scoped gauges and the fan-out of collectors."""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from decimal import Decimal

from prometheus_client import CollectorRegistry, Gauge, generate_latest

from .errors import ExporterError
from .normalize import scale, to_float


class GaugeRegistry:
    """Gauges of one endpoint, alive for a single scrape.

    Every gauge gets ``chain_id`` as its first label. Monetary gauges are
    divided by the denom coefficient when set.
    """

    def __init__(self, schema, chain_id, denom_coefficient=1.0):
        self.chain_id = chain_id
        self.denom_coefficient = denom_coefficient
        self.registry = CollectorRegistry()
        self._specs = {}
        self._gauges = {}
        for spec in schema:
            self._specs[spec.name] = spec
            self._gauges[spec.name] = Gauge(
                spec.name,
                spec.documentation,
                ["chain_id", *spec.labels],
                registry=self.registry,
            )

    def set(self, name, value, **labels):
        spec = self._specs[name]
        if spec.monetary:
            value = scale(value, self.denom_coefficient)
        elif isinstance(value, Decimal):
            value = to_float(value)
        self._gauges[name].labels(chain_id=self.chain_id, **labels).set(float(value))

    def render(self) -> bytes:
        return generate_latest(self.registry)


def _guarded(name, collect, log):
    def run():
        log.debug(f"Started querying {name}")
        started = time.time()
        try:
            collect()
        except ExporterError as e:
            log.error(f"Could not get {name}", extra={"error": str(e)})
            return
        except Exception:
            log.exception(f"Unexpected error while querying {name}")
            return
        log.debug(f"Finished querying {name}", extra={"request_time": time.time() - started})
    return run


def run_collectors(collectors, log):
    """Run every collector in parallel and wait for all of them.

    ``collectors`` maps a name used in log lines to a zero-argument callable.
    A failing collector is logged and leaves its gauges unset.
    """
    if not collectors:
        return
    with ThreadPoolExecutor(max_workers=len(collectors), thread_name_prefix="collector") as executor:
        futures = [executor.submit(_guarded(name, collect, log)) for name, collect in collectors.items()]
        for future in as_completed(futures):
            future.result()
