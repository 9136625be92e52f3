"""Bonding-curve model and launch parameter derivation."""

from launchpad.curve.launch import (
    DeployParams,
    LaunchInputs,
    default_curve_limit,
    derive_deploy_params,
    rescale_market_cap,
    rescale_starting_price,
    reserve_decimals_for,
)
from launchpad.curve.model import CurveConfig, CurveSamples, linear_segment_supply

__all__ = [
    "CurveConfig",
    "CurveSamples",
    "linear_segment_supply",
    "LaunchInputs",
    "DeployParams",
    "derive_deploy_params",
    "rescale_starting_price",
    "rescale_market_cap",
    "default_curve_limit",
    "reserve_decimals_for",
]
