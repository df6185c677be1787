import hashlib
from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntEnum
from typing import Callable, List, Optional

from . import address
from .errors import NotFound


class BondStatus(IntEnum):
    UNSPECIFIED = 0
    UNBONDED = 1
    UNBONDING = 2
    BONDED = 3

    @classmethod
    def parse(cls, raw) -> "BondStatus":
        if isinstance(raw, str):
            name = raw.upper()
            if name.startswith("BOND_STATUS_"):
                name = name[len("BOND_STATUS_"):]
            return cls.__members__.get(name, cls.UNSPECIFIED)
        try:
            return cls(int(raw))
        except ValueError:
            return cls.UNSPECIFIED


class KeyType(IntEnum):
    ED25519 = 1
    SECP256K1 = 2
    BN254 = 3


# Any type urls and CometBFT JSON type names per key type.
KEY_TYPE_URLS = {
    "/cosmos.crypto.ed25519.PubKey": KeyType.ED25519,
    "/cosmos.crypto.secp256k1.PubKey": KeyType.SECP256K1,
    "/cosmos.crypto.bn254.PubKey": KeyType.BN254,
}
TENDERMINT_BN254 = "cometbft/PubKeyBn254"


@dataclass(frozen=True)
class TendermintValidator:
    address: str
    pubkey_type: str
    pubkey: bytes


BN254Lookup = Callable[[bytes], str]


@dataclass(frozen=True)
class ConsensusPubkey:
    key_type: KeyType
    key: bytes

    def consensus_address(self, bn254_lookup: Optional[BN254Lookup] = None) -> str:
        """Address used by the slashing module for this key.

        Ed25519 and Secp256k1 addresses are derived locally; Bn254 keys are
        looked up in the consensus validator set.
        """
        if self.key_type == KeyType.BN254:
            if bn254_lookup is None:
                raise NotFound("bn254 key needs a consensus validator lookup")
            return bn254_lookup(self.key)
        return address.encode_consensus(hashlib.sha256(self.key).digest()[:20])


def bn254_lookup_from(validators) -> BN254Lookup:
    """Build a lookup over an iterable of TendermintValidator entries."""
    def lookup(key: bytes) -> str:
        for entry in validators:
            if entry.pubkey_type == TENDERMINT_BN254 and entry.pubkey == key:
                return entry.address
        raise NotFound("no bn254 consensus validator with this key")
    return lookup


@dataclass(frozen=True)
class Coin:
    denom: str
    amount: Decimal


@dataclass(frozen=True)
class Validator:
    operator_address: str
    moniker: str
    consensus_pubkey: Optional[ConsensusPubkey]
    jailed: bool
    status: BondStatus
    tokens: Decimal
    delegator_shares: Decimal
    min_self_delegation: Decimal
    commission_rate: Decimal


@dataclass(frozen=True)
class Pool:
    bonded_tokens: Decimal
    not_bonded_tokens: Decimal


@dataclass(frozen=True)
class StakingParams:
    max_validators: int
    unbonding_time: float = 0.0
    max_entries: int = 0
    historical_entries: int = 0
    bond_denom: str = ""


@dataclass(frozen=True)
class Delegation:
    delegator_address: str
    validator_address: str
    shares: Decimal
    balance: Coin


@dataclass(frozen=True)
class UnbondingDelegation:
    delegator_address: str
    validator_address: str
    balances: List[Decimal] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum(self.balances, Decimal(0))


@dataclass(frozen=True)
class Redelegation:
    delegator_address: str
    validator_src_address: str
    validator_dst_address: str
    balances: List[Decimal] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum(self.balances, Decimal(0))


@dataclass(frozen=True)
class DelegatorReward:
    validator_address: str
    reward: List[Coin]


@dataclass(frozen=True)
class SigningInfo:
    address: str
    missed_blocks_counter: int


@dataclass(frozen=True)
class DenomUnit:
    denom: str
    exponent: int


@dataclass(frozen=True)
class DenomMetadata:
    base: str
    display: str
    denom_units: List[DenomUnit]


@dataclass(frozen=True)
class MintParams:
    mint_denom: str
    inflation_rate_change: Decimal
    inflation_max: Decimal
    inflation_min: Decimal
    goal_bonded: Decimal
    blocks_per_year: int


@dataclass(frozen=True)
class SlashingParams:
    signed_blocks_window: int
    min_signed_per_window: Decimal
    downtime_jail_duration: float
    slash_fraction_double_sign: Decimal
    slash_fraction_downtime: Decimal


@dataclass(frozen=True)
class DistributionParams:
    community_tax: Decimal
    base_proposer_reward: Decimal
    bonus_proposer_reward: Decimal
