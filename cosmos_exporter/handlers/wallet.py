from collections import defaultdict
from decimal import Decimal

from .. import address as bech32
from .. import schemas
from ..collector import GaugeRegistry, run_collectors
from ..errors import BadRequest


def collect(state, log, args=None) -> GaugeRegistry:
    address = (args or {}).get("address", "")
    if not address:
        raise BadRequest("address is not provided")
    bech32.decode_account(address)

    client = state.client
    gauges = GaugeRegistry(schemas.WALLET, state.chain_id, state.denom_coefficient)

    def balance():
        for coin in client.all_balances(address):
            gauges.set("cosmos_wallet_balance", coin.amount, address=address, denom=coin.denom)

    def delegations():
        for delegation in client.delegator_delegations(address):
            gauges.set("cosmos_wallet_delegations", delegation.balance.amount, address=address,
                       denom=delegation.balance.denom, delegated_to=delegation.validator_address)

    def unbondings():
        # the response carries no denom, so the configured one is used
        totals = defaultdict(Decimal)
        for unbonding in client.unbonding_delegations(delegator=address):
            totals[unbonding.validator_address] += unbonding.total
        for validator, total in totals.items():
            gauges.set("cosmos_wallet_unbondings", total, address=address, denom=state.denom,
                       unbonded_from=validator)

    def redelegations():
        totals = defaultdict(Decimal)
        for redelegation in client.redelegations(delegator=address):
            totals[(redelegation.validator_src_address, redelegation.validator_dst_address)] += redelegation.total
        for (source, destination), total in totals.items():
            gauges.set("cosmos_wallet_redelegations", total, address=address, denom=state.denom,
                       redelegated_from=source, redelegated_to=destination)

    def rewards():
        for reward in client.delegation_total_rewards(address):
            for coin in reward.reward:
                gauges.set("cosmos_wallet_rewards", coin.amount, address=address, denom=coin.denom,
                           validator_address=reward.validator_address)

    run_collectors({
        "wallet balance": balance,
        "wallet delegations": delegations,
        "wallet unbonding delegations": unbondings,
        "wallet redelegations": redelegations,
        "wallet rewards": rewards,
    }, log)
    return gauges
