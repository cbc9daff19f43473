"""
cwdclient - typed clients for CosmWasm contracts, driven by the contract schema.
"""

__version__ = "0.1.0"
__logo__ = "⚛"

from cwdclient.dispatch import UNSET, ContractClient, ContractQueryClient, build_client_classes, encode_variant
from cwdclient.schema import ContractSchema, load_schema
from cwdclient.tx import AUTO_FEE, Coin, StdFee

__all__ = [
    "__version__",
    "UNSET",
    "AUTO_FEE",
    "Coin",
    "StdFee",
    "ContractClient",
    "ContractQueryClient",
    "ContractSchema",
    "build_client_classes",
    "encode_variant",
    "load_schema",
]
