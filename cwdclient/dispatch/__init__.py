"""Typed message dispatch: variant encoding, query and execute clients."""

from cwdclient.dispatch.encoding import UNSET, encode_value, encode_variant
from cwdclient.dispatch.execute_client import ContractClient
from cwdclient.dispatch.query_client import ContractQueryClient
from cwdclient.dispatch.surface import ParamSpec, build_client_classes, method_params

__all__ = [
    "UNSET",
    "ContractClient",
    "ContractQueryClient",
    "ParamSpec",
    "build_client_classes",
    "encode_value",
    "encode_variant",
    "method_params",
]
