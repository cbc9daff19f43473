from cwdclient.transport.lcd import LcdQueryTransport
from cwdclient.transport.protocol import QueryTransport, SigningTransport

__all__ = ["LcdQueryTransport", "QueryTransport", "SigningTransport"]
