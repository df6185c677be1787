from collections import defaultdict
from decimal import Decimal

from .. import address as bech32
from .. import schemas
from ..collector import GaugeRegistry, run_collectors
from ..errors import BadRequest, ExporterError
from ..types import BondStatus
from .validators import TendermintKeys, rank


def collect(state, log, args=None) -> GaugeRegistry:
    address = (args or {}).get("address", "")
    if not address:
        raise BadRequest("address is not provided")
    bech32.decode_validator(address)

    client = state.client
    validator = client.validator(address)

    gauges = GaugeRegistry(schemas.VALIDATOR, state.chain_id, state.denom_coefficient)
    labels = {"address": validator.operator_address, "moniker": validator.moniker}
    gauges.set("cosmos_validator_tokens", validator.tokens, denom=state.denom, **labels)
    gauges.set("cosmos_validator_delegators_shares", validator.delegator_shares, denom=state.denom, **labels)
    gauges.set("cosmos_validator_commission_rate", validator.commission_rate, **labels)
    gauges.set("cosmos_validator_status", int(validator.status), **labels)
    gauges.set("cosmos_validator_jailed", 1 if validator.jailed else 0, **labels)

    def delegations():
        for delegation in client.validator_delegations(address):
            gauges.set("cosmos_validator_delegations", delegation.balance.amount,
                       denom=state.denom, delegated_by=delegation.delegator_address, **labels)

    def commission():
        for coin in client.validator_commission(address):
            gauges.set("cosmos_validator_commission", coin.amount, denom=coin.denom, **labels)

    def rewards():
        for coin in client.validator_outstanding_rewards(address):
            gauges.set("cosmos_validator_rewards", coin.amount, denom=coin.denom, **labels)

    def unbondings():
        totals = defaultdict(Decimal)
        for unbonding in client.unbonding_delegations(validator=address):
            totals[unbonding.delegator_address] += unbonding.total
        for delegator, total in totals.items():
            gauges.set("cosmos_validator_unbondings", total, denom=state.denom, unbonded_by=delegator, **labels)

    def redelegations():
        totals = defaultdict(Decimal)
        for redelegation in client.redelegations(src_validator=address):
            totals[(redelegation.delegator_address, redelegation.validator_dst_address)] += redelegation.total
        for (delegator, destination), total in totals.items():
            gauges.set("cosmos_validator_redelegations", total, denom=state.denom,
                       redelegated_by=delegator, redelegated_to=destination, **labels)

    def missed_blocks():
        if validator.status != BondStatus.BONDED:
            log.trace("Validator is not active, not returning missed blocks amount", extra=labels)
            return
        if validator.consensus_pubkey is None:
            log.debug("Validator has no consensus pubkey, skipping missed blocks", extra=labels)
            return
        try:
            consensus_address = validator.consensus_pubkey.consensus_address(TendermintKeys(client))
        except ExporterError as e:
            log.debug("Could not get validator consensus address, skipping missed blocks",
                      extra={**labels, "error": str(e)})
            return
        try:
            info = client.signing_info(consensus_address)
        except ExporterError as e:
            log.debug("Could not get signing info for validator", extra={**labels, "error": str(e)})
            return
        gauges.set("cosmos_validator_missed_blocks", info.missed_blocks_counter, **labels)

    def rank_and_active():
        ranked = rank(client.validators())
        position = next(
            (index + 1 for index, v in enumerate(ranked) if v.operator_address == validator.operator_address),
            None,
        )
        if position is None:
            log.warning("Could not find validator in validators list", extra=labels)
            return
        gauges.set("cosmos_validator_rank", position, **labels)
        max_validators = client.params().max_validators
        if max_validators:
            gauges.set("cosmos_validator_active", 1 if position <= max_validators else 0, **labels)

    run_collectors({
        "validator delegations": delegations,
        "validator commission": commission,
        "validator rewards": rewards,
        "validator unbonding delegations": unbondings,
        "validator redelegations": redelegations,
        "validator signing info": missed_blocks,
        "validator rank and active status": rank_and_active,
    }, log)
    return gauges
