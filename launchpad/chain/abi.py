"""Minimal ABIs for the contracts the engine calls, just the functions we need."""


def _fn(name: str, inputs: list[tuple[str, str]], outputs: list[tuple[str, str]], mutability: str = "view") -> dict:
    return {
        "name": name,
        "type": "function",
        "stateMutability": mutability,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": n, "type": t} for n, t in outputs],
    }


ERC20_ABI = [
    _fn("name", [], [("", "string")]),
    _fn("symbol", [], [("", "string")]),
    _fn("decimals", [], [("", "uint8")]),
    _fn("owner", [], [("", "address")]),
    _fn("totalSupply", [], [("", "uint256")]),
    _fn("balanceOf", [("account", "address")], [("", "uint256")]),
    _fn("allowance", [("owner", "address"), ("spender", "address")], [("", "uint256")]),
    _fn("approve", [("spender", "address"), ("value", "uint256")], [("", "bool")], "nonpayable"),
]

_EXPECTED_SWAP_OUTPUTS = [
    ("tokensIn", "uint256"),
    ("tokensOut", "uint256"),
    ("newSqrtPriceX96", "uint160"),
]

POOL_ABI = [
    _fn("token0", [], [("", "address")]),
    _fn("token1", [], [("", "address")]),
    _fn("fee", [], [("", "uint24")]),
    _fn("owner", [], [("", "address")]),
    _fn("reserve", [], [("", "address")]),
    _fn("launch", [], [("", "address")]),
    _fn(
        "slot0",
        [],
        [
            ("sqrtPriceX96", "uint160"),
            ("tick", "int24"),
            ("observationIndex", "uint16"),
            ("observationCardinality", "uint16"),
            ("observationCardinalityNext", "uint16"),
            ("feeProtocol", "uint8"),
            ("unlocked", "bool"),
        ],
    ),
    _fn("getReserves", [], [("reserve0", "uint256"), ("reserve1", "uint256")]),
    _fn(
        "curve",
        [],
        [
            ("startPrice", "uint256"),
            ("switchPrice", "uint256"),
            ("curveLimit", "uint96"),
            ("reserveOffset", "uint128"),
        ],
    ),
    _fn(
        "computeExpectedTokensOut",
        [
            ("inputToken", "address"),
            ("maxTokensIn", "uint256"),
            ("sqrtPriceX96", "uint160"),
            ("sqrtPriceLimitX96", "uint160"),
        ],
        _EXPECTED_SWAP_OUTPUTS,
    ),
    _fn(
        "computeExpectedTokensIn",
        [
            ("inputToken", "address"),
            ("maxTokensOut", "uint256"),
            ("sqrtPriceX96", "uint160"),
            ("sqrtPriceLimitX96", "uint160"),
        ],
        _EXPECTED_SWAP_OUTPUTS,
    ),
    _fn(
        "collect",
        [
            ("recipient", "address"),
            ("tickLower", "int24"),
            ("tickUpper", "int24"),
            ("amount0Requested", "uint128"),
            ("amount1Requested", "uint128"),
        ],
        [("amount0", "uint128"), ("amount1", "uint128")],
        "nonpayable",
    ),
]

FACTORY_ABI = [
    _fn("totalTokens", [], [("", "uint256")]),
    _fn("listManyTokens", [("start", "int256"), ("end", "int256")], [("array", "address[]")]),
    {
        "name": "listManyTokenDetails",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "start", "type": "int256"}, {"name": "end", "type": "int256"}],
        "outputs": [
            {
                "name": "array",
                "type": "tuple[]",
                "components": [
                    {"name": "token", "type": "address"},
                    {"name": "owner", "type": "address"},
                    {"name": "name", "type": "string"},
                    {"name": "symbol", "type": "string"},
                ],
            }
        ],
    },
    _fn(
        "launchToken",
        [
            ("name", "string"),
            ("symbol", "string"),
            ("description", "string"),
            ("decimals", "uint8"),
            ("reserve", "address"),
            ("fee", "uint24"),
            ("startPrice", "uint256"),
            ("switchPrice", "uint256"),
            ("curveLimit", "uint96"),
            ("reserveOffset", "uint128"),
            ("totalSupply", "uint128"),
        ],
        [("token", "address"), ("pool", "address")],
        "nonpayable",
    ),
    {
        "name": "TokenCreated",
        "type": "event",
        "anonymous": False,
        "inputs": [
            {"name": "token", "type": "address", "indexed": True},
            {"name": "decimals", "type": "uint8", "indexed": False},
            {"name": "name", "type": "string", "indexed": False},
            {"name": "symbol", "type": "string", "indexed": False},
        ],
    },
]

POOL_FACTORY_ABI = [
    _fn(
        "getPool",
        [("tokenA", "address"), ("tokenB", "address"), ("fee", "uint24")],
        [("pool", "address")],
    ),
]

SWAPPER_ABI = [
    _fn(
        "swapV3ExactIn",
        [("pool", "address"), ("zeroForOne", "bool"), ("amountIn", "uint256"), ("minimum", "uint128")],
        [],
        "nonpayable",
    ),
    _fn(
        "swapV3ExactOut",
        [("pool", "address"), ("zeroForOne", "bool"), ("amountOut", "uint256"), ("maximum", "uint128")],
        [],
        "nonpayable",
    ),
]

__all__ = ["ERC20_ABI", "POOL_ABI", "FACTORY_ABI", "POOL_FACTORY_ABI", "SWAPPER_ABI"]
