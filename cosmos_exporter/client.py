"""Upstream client: gRPC query services plus the Tendermint RPC.

Staking calls go through a ``StakingDialect`` picked from the network type.
Everything returned from here is a record from ``types`` with ``Decimal``
amounts; callers never see protobuf messages.
"""

import base64
import binascii
import logging
from typing import Iterator, List, Optional

import grpc
from google.protobuf.message import DecodeError

from . import protos
from .errors import NotFound, UpstreamUnavailable
from .normalize import parse_decimal, parse_int, parse_legacy_dec, sanitize_utf8
from .types import (
    KEY_TYPE_URLS,
    BondStatus,
    Coin,
    ConsensusPubkey,
    Delegation,
    DelegatorReward,
    DenomMetadata,
    DenomUnit,
    DistributionParams,
    KeyType,
    MintParams,
    Pool,
    Redelegation,
    SigningInfo,
    SlashingParams,
    StakingParams,
    TendermintValidator,
    UnbondingDelegation,
    Validator,
)

logger = logging.getLogger(__name__)

COSMOS = "cosmos"
ZENROCK = "zenrock"
NETWORK_TYPES = (COSMOS, ZENROCK)


class _Service:
    """A set of bound gRPC methods sharing one channel."""

    def __init__(self, channel, methods, limit):
        self.limit = limit
        self._methods = methods
        self._stubs = {name: method.bind(channel) for name, method in methods.items()}

    def page(self):
        return protos.PageRequest(limit=self.limit)

    def call(self, name, timeout=None, **fields):
        method = self._methods[name]
        request = method.request(**fields)
        try:
            return self._stubs[name](request, timeout=timeout)
        except grpc.RpcError as e:
            raise UpstreamUnavailable(method.path, _describe(e)) from e


def _describe(error: grpc.RpcError) -> str:
    code = error.code() if callable(getattr(error, "code", None)) else None
    details = error.details() if callable(getattr(error, "details", None)) else None
    if code is None:
        return str(error)
    return f"{code.name}: {details}" if details else code.name


def _coins(messages, parse=parse_int) -> List[Coin]:
    return [Coin(denom=c.denom, amount=parse(c.amount)) for c in messages]


def _duration_seconds(duration) -> float:
    return duration.seconds + duration.nanos / 1e9


def _pubkey_from_any(type_url, value) -> Optional[ConsensusPubkey]:
    key_type = KEY_TYPE_URLS.get(type_url)
    if key_type is None:
        logger.warning("Unsupported consensus pubkey type", extra={"type_url": type_url})
        return None
    try:
        return ConsensusPubkey(key_type=key_type, key=protos.PubKey.FromString(value).key)
    except DecodeError:
        logger.warning("Could not decode consensus pubkey", extra={"type_url": type_url})
        return None


class StakingDialect:
    """Staking queries with the same result shape on every network type."""

    network_type = None

    def pool(self) -> Pool:
        raise NotImplementedError

    def validators(self) -> List[Validator]:
        raise NotImplementedError

    def validator(self, address) -> Validator:
        raise NotImplementedError

    def validator_delegations(self, address) -> List[Delegation]:
        raise NotImplementedError

    def delegator_delegations(self, address) -> List[Delegation]:
        raise NotImplementedError

    def params(self, timeout=None) -> StakingParams:
        raise NotImplementedError


class CosmosStaking(StakingDialect):
    """Standard ``cosmos.staking.v1beta1`` service."""

    network_type = COSMOS

    def __init__(self, channel, limit):
        self.service = _Service(channel, protos.STAKING, limit)

    def pool(self):
        pool = self.service.call("Pool").pool
        return Pool(bonded_tokens=parse_int(pool.bonded_tokens), not_bonded_tokens=parse_int(pool.not_bonded_tokens))

    def validators(self):
        response = self.service.call("Validators", pagination=self.service.page())
        return [self._validator(v) for v in response.validators]

    def validator(self, address):
        response = self.service.call("Validator", validator_addr=address)
        if not response.HasField("validator"):
            raise NotFound(f"validator {address} not found")
        return self._validator(response.validator)

    def validator_delegations(self, address):
        response = self.service.call("ValidatorDelegations", validator_addr=address, pagination=self.service.page())
        return [self._delegation(d) for d in response.delegation_responses]

    def delegator_delegations(self, address):
        response = self.service.call("DelegatorDelegations", delegator_addr=address, pagination=self.service.page())
        return [self._delegation(d) for d in response.delegation_responses]

    def params(self, timeout=None):
        params = self.service.call("Params", timeout=timeout).params
        return StakingParams(
            max_validators=params.max_validators,
            unbonding_time=_duration_seconds(params.unbonding_time),
            max_entries=params.max_entries,
            historical_entries=params.historical_entries,
            bond_denom=params.bond_denom,
        )

    def unbonding_delegations(self, validator=None, delegator=None) -> List[UnbondingDelegation]:
        if validator:
            response = self.service.call(
                "ValidatorUnbondingDelegations", validator_addr=validator, pagination=self.service.page())
        else:
            response = self.service.call(
                "DelegatorUnbondingDelegations", delegator_addr=delegator, pagination=self.service.page())
        return [
            UnbondingDelegation(
                delegator_address=u.delegator_address,
                validator_address=u.validator_address,
                balances=[parse_int(entry.balance) for entry in u.entries],
            )
            for u in response.unbonding_responses
        ]

    def redelegations(self, src_validator=None, delegator=None) -> List[Redelegation]:
        response = self.service.call(
            "Redelegations",
            delegator_addr=delegator or "",
            src_validator_addr=src_validator or "",
            pagination=self.service.page(),
        )
        return [
            Redelegation(
                delegator_address=r.redelegation.delegator_address,
                validator_src_address=r.redelegation.validator_src_address,
                validator_dst_address=r.redelegation.validator_dst_address,
                balances=[parse_int(entry.balance) for entry in r.entries],
            )
            for r in response.redelegation_responses
        ]

    @staticmethod
    def _validator(v) -> Validator:
        pubkey = None
        if v.HasField("consensus_pubkey"):
            pubkey = _pubkey_from_any(v.consensus_pubkey.type_url, v.consensus_pubkey.value)
        return Validator(
            operator_address=v.operator_address,
            moniker=sanitize_utf8(v.description.moniker),
            consensus_pubkey=pubkey,
            jailed=v.jailed,
            status=BondStatus.parse(v.status),
            tokens=parse_int(v.tokens),
            delegator_shares=parse_legacy_dec(v.delegator_shares),
            min_self_delegation=parse_int(v.min_self_delegation),
            commission_rate=parse_legacy_dec(v.commission.commission_rates.rate),
        )

    @staticmethod
    def _delegation(d) -> Delegation:
        return Delegation(
            delegator_address=d.delegation.delegator_address,
            validator_address=d.delegation.validator_address,
            shares=parse_legacy_dec(d.delegation.shares),
            balance=Coin(denom=d.balance.denom, amount=parse_int(d.balance.amount)),
        )


class ZenrockStaking(StakingDialect):
    """``zrchain.validation`` service; numbers arrive as decimal strings."""

    network_type = ZENROCK

    def __init__(self, channel, limit):
        self.service = _Service(channel, protos.ZENROCK, limit)

    def pool(self):
        pool = self.service.call("Pool").pool
        return Pool(
            bonded_tokens=parse_decimal(pool.bonded_tokens),
            not_bonded_tokens=parse_decimal(pool.not_bonded_tokens),
        )

    def validators(self):
        response = self.service.call("Validators", pagination=self.service.page())
        return [self._validator(v) for v in response.validators]

    def validator(self, address):
        response = self.service.call("Validator", validator_addr=address)
        if not response.HasField("validator"):
            raise NotFound(f"validator {address} not found")
        return self._validator(response.validator)

    def validator_delegations(self, address):
        response = self.service.call("ValidatorDelegations", validator_addr=address, pagination=self.service.page())
        return [self._delegation(d) for d in response.delegation_responses]

    def delegator_delegations(self, address):
        response = self.service.call("DelegatorDelegations", delegator_addr=address, pagination=self.service.page())
        return [self._delegation(d) for d in response.delegation_responses]

    def params(self, timeout=None):
        params = self.service.call("Params", timeout=timeout).params
        return StakingParams(
            max_validators=params.max_validators,
            # nanoseconds
            unbonding_time=params.unbonding_time / 1e9,
            max_entries=params.max_entries,
            historical_entries=params.historical_entries,
            bond_denom=params.bond_denom,
        )

    @staticmethod
    def _pubkey(raw: bytes) -> Optional[ConsensusPubkey]:
        """The key is either a serialized Any or a base64/raw Ed25519 key."""
        if not raw:
            return None
        try:
            wrapped = protos.Any.FromString(raw)
        except DecodeError:
            wrapped = None
        if wrapped is not None and wrapped.type_url:
            return _pubkey_from_any(wrapped.type_url, wrapped.value)
        try:
            key = base64.b64decode(raw, validate=True)
        except binascii.Error:
            key = raw
        if len(key) != 32:
            logger.warning("Unrecognised zenrock consensus pubkey", extra={"length": len(raw)})
            return None
        return ConsensusPubkey(key_type=KeyType.ED25519, key=key)

    @classmethod
    def _validator(cls, v) -> Validator:
        return Validator(
            operator_address=v.operator_address,
            moniker=sanitize_utf8(v.description.moniker),
            consensus_pubkey=cls._pubkey(v.consensus_pubkey),
            jailed=v.jailed,
            status=BondStatus.parse(v.status),
            tokens=parse_decimal(v.tokens),
            delegator_shares=parse_decimal(v.delegator_shares),
            min_self_delegation=parse_decimal(v.min_self_delegation),
            commission_rate=parse_decimal(v.commission.commission_rates.rate),
        )

    @staticmethod
    def _delegation(d) -> Delegation:
        return Delegation(
            delegator_address=d.delegation.delegator_address,
            validator_address=d.delegation.validator_address,
            shares=parse_decimal(d.delegation.shares),
            balance=Coin(denom=d.balance.denom, amount=parse_decimal(d.balance.amount)),
        )


def staking_dialect(network_type, channel, limit) -> StakingDialect:
    if network_type == COSMOS:
        return CosmosStaking(channel, limit)
    if network_type == ZENROCK:
        return ZenrockStaking(channel, limit)
    raise ValueError(f"unknown network type {network_type!r}")


class UpstreamClient:
    """Every query the collectors need, behind one object.

    Redelegations and unbonding delegations always use the standard staking
    service; zenrock chains keep them there.
    """

    def __init__(self, channel, tendermint, limit, network_type=COSMOS):
        self.limit = limit
        self.network_type = network_type
        self.tendermint = tendermint
        self.staking = staking_dialect(network_type, channel, limit)
        self._cosmos_staking = self.staking if network_type == COSMOS else CosmosStaking(channel, limit)
        self._zenrock_staking = self.staking if network_type == ZENROCK else ZenrockStaking(channel, limit)
        self.bank = _Service(channel, protos.BANK, limit)
        self.mint = _Service(channel, protos.MINT, limit)
        self.distribution = _Service(channel, protos.DISTRIBUTION, limit)
        self.slashing = _Service(channel, protos.SLASHING, limit)

    # staking family

    def pool(self) -> Pool:
        return self.staking.pool()

    def validators(self) -> List[Validator]:
        return self.staking.validators()

    def validator(self, address) -> Validator:
        return self.staking.validator(address)

    def validator_delegations(self, address) -> List[Delegation]:
        return self.staking.validator_delegations(address)

    def delegator_delegations(self, address) -> List[Delegation]:
        return self.staking.delegator_delegations(address)

    def params(self, timeout=None) -> StakingParams:
        return self.staking.params(timeout=timeout)

    def redelegations(self, src_validator=None, delegator=None) -> List[Redelegation]:
        return self._cosmos_staking.redelegations(src_validator=src_validator, delegator=delegator)

    def unbonding_delegations(self, validator=None, delegator=None) -> List[UnbondingDelegation]:
        return self._cosmos_staking.unbonding_delegations(validator=validator, delegator=delegator)

    def cosmos_staking_params(self, timeout=None) -> StakingParams:
        return self._cosmos_staking.params(timeout=timeout)

    def zenrock_params(self, timeout=None) -> StakingParams:
        return self._zenrock_staking.params(timeout=timeout)

    # bank

    def total_supply(self) -> List[Coin]:
        return _coins(self.bank.call("TotalSupply", pagination=self.bank.page()).supply)

    def all_balances(self, address) -> List[Coin]:
        return _coins(self.bank.call("AllBalances", address=address, pagination=self.bank.page()).balances)

    def bank_params(self, timeout=None) -> bool:
        return self.bank.call("Params", timeout=timeout).params.default_send_enabled

    def denoms_metadata(self) -> List[DenomMetadata]:
        response = self.bank.call("DenomsMetadata", pagination=self.bank.page())
        return [
            DenomMetadata(
                base=m.base,
                display=m.display,
                denom_units=[DenomUnit(denom=u.denom, exponent=u.exponent) for u in m.denom_units],
            )
            for m in response.metadatas
        ]

    # mint

    def inflation(self):
        return parse_legacy_dec(self.mint.call("Inflation").inflation)

    def annual_provisions(self):
        return parse_legacy_dec(self.mint.call("AnnualProvisions").annual_provisions)

    def mint_params(self, timeout=None) -> MintParams:
        params = self.mint.call("Params", timeout=timeout).params
        return MintParams(
            mint_denom=params.mint_denom,
            inflation_rate_change=parse_legacy_dec(params.inflation_rate_change),
            inflation_max=parse_legacy_dec(params.inflation_max),
            inflation_min=parse_legacy_dec(params.inflation_min),
            goal_bonded=parse_legacy_dec(params.goal_bonded),
            blocks_per_year=params.blocks_per_year,
        )

    # distribution

    def community_pool(self) -> List[Coin]:
        return _coins(self.distribution.call("CommunityPool").pool, parse=parse_legacy_dec)

    def validator_commission(self, address) -> List[Coin]:
        response = self.distribution.call("ValidatorCommission", validator_address=address)
        return _coins(response.commission.commission, parse=parse_legacy_dec)

    def validator_outstanding_rewards(self, address) -> List[Coin]:
        response = self.distribution.call("ValidatorOutstandingRewards", validator_address=address)
        return _coins(response.rewards.rewards, parse=parse_legacy_dec)

    def delegation_total_rewards(self, address) -> List[DelegatorReward]:
        response = self.distribution.call("DelegationTotalRewards", delegator_address=address)
        return [
            DelegatorReward(validator_address=r.validator_address, reward=_coins(r.reward, parse=parse_legacy_dec))
            for r in response.rewards
        ]

    def distribution_params(self) -> DistributionParams:
        params = self.distribution.call("Params").params
        return DistributionParams(
            community_tax=parse_legacy_dec(params.community_tax),
            base_proposer_reward=parse_legacy_dec(params.base_proposer_reward),
            bonus_proposer_reward=parse_legacy_dec(params.bonus_proposer_reward),
        )

    # slashing

    def signing_info(self, consensus_address) -> SigningInfo:
        info = self.slashing.call("SigningInfo", cons_address=consensus_address).val_signing_info
        return SigningInfo(address=info.address, missed_blocks_counter=info.missed_blocks_counter)

    def signing_infos(self) -> List[SigningInfo]:
        response = self.slashing.call("SigningInfos", pagination=self.slashing.page())
        return [SigningInfo(address=i.address, missed_blocks_counter=i.missed_blocks_counter) for i in response.info]

    def slashing_params(self) -> SlashingParams:
        params = self.slashing.call("Params").params
        return SlashingParams(
            signed_blocks_window=params.signed_blocks_window,
            min_signed_per_window=parse_legacy_dec(params.min_signed_per_window),
            downtime_jail_duration=_duration_seconds(params.downtime_jail_duration),
            slash_fraction_double_sign=parse_legacy_dec(params.slash_fraction_double_sign),
            slash_fraction_downtime=parse_legacy_dec(params.slash_fraction_downtime),
        )

    # tendermint

    def tendermint_status(self) -> str:
        return self.tendermint.status()

    def tendermint_validators(self) -> Iterator[TendermintValidator]:
        return self.tendermint.validators()
