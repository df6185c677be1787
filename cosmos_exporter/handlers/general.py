from .. import schemas
from ..collector import GaugeRegistry, run_collectors


def collect(state, log, args=None) -> GaugeRegistry:
    gauges = GaugeRegistry(schemas.GENERAL, state.chain_id, state.denom_coefficient)
    client = state.client

    def staking_pool():
        pool = client.pool()
        gauges.set("cosmos_pool_bonded_tokens", pool.bonded_tokens)
        gauges.set("cosmos_pool_not_bonded_tokens", pool.not_bonded_tokens)

    def community_pool():
        for coin in client.community_pool():
            gauges.set("cosmos_general_community_pool", coin.amount, denom=coin.denom)

    def total_supply():
        for coin in client.total_supply():
            gauges.set("cosmos_general_supply_total", coin.amount, denom=coin.denom)

    def inflation():
        gauges.set("cosmos_general_inflation", client.inflation())

    def annual_provisions():
        gauges.set("cosmos_general_annual_provisions", client.annual_provisions(), denom=state.denom)

    run_collectors({
        "staking pool": staking_pool,
        "distribution community pool": community_pool,
        "bank total supply": total_supply,
        "inflation": inflation,
        "annual provisions": annual_provisions,
    }, log)
    return gauges
