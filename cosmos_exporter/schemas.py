from collections import namedtuple

GaugeSpec = namedtuple("GaugeSpec", ["name", "documentation", "labels", "monetary"])


def gauge(name, documentation, labels=(), monetary=False):
    return GaugeSpec(name, documentation, tuple(labels), monetary)


GENERAL = [
    gauge("cosmos_pool_bonded_tokens", "Bonded tokens in the Cosmos-based blockchain pool", monetary=True),
    gauge("cosmos_pool_not_bonded_tokens", "Not bonded tokens in the Cosmos-based blockchain pool", monetary=True),
    gauge("cosmos_general_community_pool", "Community pool", ["denom"], monetary=True),
    gauge("cosmos_general_supply_total", "Total supply", ["denom"], monetary=True),
    gauge("cosmos_general_inflation", "Inflation rate"),
    gauge("cosmos_general_annual_provisions", "Annual provisions", ["denom"], monetary=True),
]

VALIDATORS = [
    gauge("cosmos_validators_tokens", "Tokens of the Cosmos-based blockchain validator",
          ["address", "moniker", "denom"], monetary=True),
    gauge("cosmos_validators_delegator_shares", "Delegator shares of the Cosmos-based blockchain validator",
          ["address", "moniker", "denom"], monetary=True),
    gauge("cosmos_validators_min_self_delegation",
          "Self-declared minimum self-delegation shares of the Cosmos-based blockchain validator",
          ["address", "moniker", "denom"], monetary=True),
    gauge("cosmos_validators_commission", "Commission of the Cosmos-based blockchain validator",
          ["address", "moniker"]),
    gauge("cosmos_validators_status", "Status of the Cosmos-based blockchain validator", ["address", "moniker"]),
    gauge("cosmos_validators_jailed", "Jailed status of the Cosmos-based blockchain validator",
          ["address", "moniker"]),
    gauge("cosmos_validators_missed_blocks", "Missed blocks of the Cosmos-based blockchain validator",
          ["address", "moniker"]),
    gauge("cosmos_validators_rank", "Rank of the Cosmos-based blockchain validator", ["address", "moniker"]),
    gauge("cosmos_validators_active", "1 if the Cosmos-based blockchain validator is in active set, 0 if not",
          ["address", "moniker"]),
]

VALIDATOR = [
    gauge("cosmos_validator_delegations", "Delegations of the Cosmos-based blockchain validator",
          ["address", "moniker", "denom", "delegated_by"], monetary=True),
    gauge("cosmos_validator_tokens", "Tokens of the Cosmos-based blockchain validator",
          ["address", "moniker", "denom"], monetary=True),
    gauge("cosmos_validator_delegators_shares", "Delegators shares of the Cosmos-based blockchain validator",
          ["address", "moniker", "denom"], monetary=True),
    gauge("cosmos_validator_commission_rate", "Commission rate of the Cosmos-based blockchain validator",
          ["address", "moniker"]),
    gauge("cosmos_validator_commission", "Commission of the Cosmos-based blockchain validator",
          ["address", "moniker", "denom"], monetary=True),
    gauge("cosmos_validator_rewards", "Rewards of the Cosmos-based blockchain validator",
          ["address", "moniker", "denom"], monetary=True),
    gauge("cosmos_validator_unbondings", "Unbondings of the Cosmos-based blockchain validator",
          ["address", "moniker", "denom", "unbonded_by"], monetary=True),
    gauge("cosmos_validator_redelegations", "Redelegations of the Cosmos-based blockchain validator",
          ["address", "moniker", "denom", "redelegated_by", "redelegated_to"], monetary=True),
    gauge("cosmos_validator_missed_blocks", "Missed blocks of the Cosmos-based blockchain validator",
          ["address", "moniker"]),
    gauge("cosmos_validator_rank", "Rank of the Cosmos-based blockchain validator", ["address", "moniker"]),
    gauge("cosmos_validator_active", "1 if the Cosmos-based blockchain validator is in active set, 0 if not",
          ["address", "moniker"]),
    gauge("cosmos_validator_status", "Status of the Cosmos-based blockchain validator", ["address", "moniker"]),
    gauge("cosmos_validator_jailed", "1 if the Cosmos-based blockchain validator is jailed, 0 if not",
          ["address", "moniker"]),
]

WALLET = [
    gauge("cosmos_wallet_balance", "Balance of the Cosmos-based blockchain wallet",
          ["address", "denom"], monetary=True),
    gauge("cosmos_wallet_delegations", "Delegations of the Cosmos-based blockchain wallet",
          ["address", "denom", "delegated_to"], monetary=True),
    gauge("cosmos_wallet_unbondings", "Unbondings of the Cosmos-based blockchain wallet",
          ["address", "denom", "unbonded_from"], monetary=True),
    gauge("cosmos_wallet_redelegations", "Redelegations of the Cosmos-based blockchain wallet",
          ["address", "denom", "redelegated_from", "redelegated_to"], monetary=True),
    gauge("cosmos_wallet_rewards", "Rewards of the Cosmos-based blockchain wallet",
          ["address", "denom", "validator_address"], monetary=True),
]

PARAMS = [
    gauge("cosmos_params_max_validators", "Active set length"),
    gauge("cosmos_params_max_entries", "Max entries for unbonding and redelegation"),
    gauge("cosmos_params_historical_entries", "Number of historical entries to persist"),
    gauge("cosmos_params_unbonding_time", "Unbonding time, in seconds"),
    gauge("cosmos_params_blocks_per_year", "Block per year"),
    gauge("cosmos_params_goal_bonded", "Goal of percent bonded atoms"),
    gauge("cosmos_params_inflation_min", "Minimum inflation rate"),
    gauge("cosmos_params_inflation_max", "Maximum inflation rate"),
    gauge("cosmos_params_inflation_rate_change", "Maximum annual change in inflation rate"),
    gauge("cosmos_params_downtime_jail_duration", "Downtime jail duration, in seconds"),
    gauge("cosmos_params_min_signed_per_window", "Minimal amount of blocks to sign per window to avoid slashing"),
    gauge("cosmos_params_signed_blocks_window", "Signed blocks window"),
    gauge("cosmos_params_slash_fraction_double_sign", "% of staked amount to be slashed on double signing"),
    gauge("cosmos_params_slash_fraction_downtime", "% of staked amount to be slashed on downtime"),
    gauge("cosmos_params_base_proposer_reward", "Base proposer reward"),
    gauge("cosmos_params_bonus_proposer_reward", "Bonus proposer reward"),
    gauge("cosmos_params_community_tax", "Community tax"),
]
