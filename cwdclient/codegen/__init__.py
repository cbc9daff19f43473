"""Source generators for typed contract clients."""

from cwdclient.codegen.python import emit_python_client, write_python_client

__all__ = ["emit_python_client", "write_python_client"]
