"""
Entry point for running cwdclient as a module: python -m cwdclient
"""

from cwdclient.cli.commands import app

if __name__ == "__main__":
    app()
