from .. import schemas
from ..address import consensus_address_bytes
from ..collector import GaugeRegistry, run_collectors
from ..errors import ExporterError
from ..types import BondStatus, bn254_lookup_from


def rank(validators):
    """Validators by delegator shares, highest first; ties keep input order."""
    return sorted(validators, key=lambda v: v.delegator_shares, reverse=True)


class TendermintKeys:
    """Bn254 consensus key lookup backed by one walk of Tendermint /validators."""

    def __init__(self, client):
        self.client = client
        self._validators = None
        self._error = None

    def __call__(self, key):
        # a failed walk is not retried within the same request
        if self._error is not None:
            raise self._error
        if self._validators is None:
            try:
                self._validators = list(self.client.tendermint_validators())
            except ExporterError as e:
                self._error = e
                raise
        return bn254_lookup_from(self._validators)(key)


def collect(state, log, args=None) -> GaugeRegistry:
    gauges = GaugeRegistry(schemas.VALIDATORS, state.chain_id, state.denom_coefficient)
    client = state.client
    results = {}

    def validators():
        results["validators"] = client.validators()

    def signing_infos():
        results["signing_infos"] = client.signing_infos()

    def staking_params():
        results["params"] = client.params()

    run_collectors({
        "validators": validators,
        "validators signing infos": signing_infos,
        "staking params": staking_params,
    }, log)

    if "validators" not in results:
        return gauges

    missed_blocks = {}
    for info in results.get("signing_infos", []):
        raw = consensus_address_bytes(info.address)
        if raw is not None:
            missed_blocks[raw] = info.missed_blocks_counter

    params = results.get("params")
    max_validators = params.max_validators if params else 0
    lookup = TendermintKeys(client)

    for index, validator in enumerate(rank(results["validators"])):
        labels = {"address": validator.operator_address, "moniker": validator.moniker}
        gauges.set("cosmos_validators_tokens", validator.tokens, denom=state.denom, **labels)
        gauges.set("cosmos_validators_delegator_shares", validator.delegator_shares, denom=state.denom, **labels)
        gauges.set("cosmos_validators_min_self_delegation", validator.min_self_delegation,
                   denom=state.denom, **labels)
        gauges.set("cosmos_validators_commission", validator.commission_rate, **labels)
        gauges.set("cosmos_validators_status", int(validator.status), **labels)
        gauges.set("cosmos_validators_jailed", 1 if validator.jailed else 0, **labels)
        gauges.set("cosmos_validators_rank", index + 1, **labels)
        if max_validators:
            gauges.set("cosmos_validators_active", 1 if index + 1 <= max_validators else 0, **labels)

        if validator.status != BondStatus.BONDED or validator.consensus_pubkey is None:
            continue
        try:
            consensus_address = validator.consensus_pubkey.consensus_address(lookup)
        except ExporterError as e:
            log.debug("Could not get validator consensus address",
                      extra={"address": validator.operator_address, "error": str(e)})
            continue
        counter = missed_blocks.get(consensus_address_bytes(consensus_address))
        if counter is not None:
            gauges.set("cosmos_validators_missed_blocks", counter, **labels)

    return gauges
