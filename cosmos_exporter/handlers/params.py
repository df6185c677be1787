from .. import schemas
from ..collector import GaugeRegistry, run_collectors


def collect(state, log, args=None) -> GaugeRegistry:
    gauges = GaugeRegistry(schemas.PARAMS, state.chain_id, state.denom_coefficient)
    client = state.client

    def staking():
        params = client.params()
        gauges.set("cosmos_params_max_validators", params.max_validators)
        gauges.set("cosmos_params_max_entries", params.max_entries)
        gauges.set("cosmos_params_historical_entries", params.historical_entries)
        gauges.set("cosmos_params_unbonding_time", params.unbonding_time)

    def mint():
        params = client.mint_params()
        gauges.set("cosmos_params_blocks_per_year", params.blocks_per_year)
        gauges.set("cosmos_params_goal_bonded", params.goal_bonded)
        gauges.set("cosmos_params_inflation_min", params.inflation_min)
        gauges.set("cosmos_params_inflation_max", params.inflation_max)
        gauges.set("cosmos_params_inflation_rate_change", params.inflation_rate_change)

    def slashing():
        params = client.slashing_params()
        gauges.set("cosmos_params_downtime_jail_duration", params.downtime_jail_duration)
        gauges.set("cosmos_params_min_signed_per_window", params.min_signed_per_window)
        gauges.set("cosmos_params_signed_blocks_window", params.signed_blocks_window)
        gauges.set("cosmos_params_slash_fraction_double_sign", params.slash_fraction_double_sign)
        gauges.set("cosmos_params_slash_fraction_downtime", params.slash_fraction_downtime)

    def distribution():
        params = client.distribution_params()
        gauges.set("cosmos_params_base_proposer_reward", params.base_proposer_reward)
        gauges.set("cosmos_params_bonus_proposer_reward", params.bonus_proposer_reward)
        gauges.set("cosmos_params_community_tax", params.community_tax)

    run_collectors({
        "staking params": staking,
        "mint params": mint,
        "slashing params": slashing,
        "distribution params": distribution,
    }, log)
    return gauges
