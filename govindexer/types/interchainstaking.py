"""
Interchain staking module parameters.
"""

from decimal import Decimal

from pydantic import BaseModel


class InterchainStakingParamsPayload(BaseModel):
    deposit_interval: int
    validatorset_interval: int
    commission_rate: Decimal
    unbonding_enabled: bool = False
    lsm_enabled: bool = False


class InterchainStakingParams(BaseModel):
    """Interchain staking parameters observed at a given height."""

    params: InterchainStakingParamsPayload
    height: int
