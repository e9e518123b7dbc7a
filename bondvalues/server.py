"""HTTP API serving bond lists and daily bond values as CSV."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any, Mapping, Sequence

from flask import Flask, Response

from bondvalues.model import BondId
from bondvalues.models import GetBond404Response, GetBondCsvPathParams, GetBondPathParams
from bondvalues.reader import BondsReadError
from bondvalues.service import BondsService

logger = logging.getLogger(__name__)

_VERSION = "0.1.0"
_APP_NAME = "bondvalues"
_SERVICE_KEY = "bonds_service"


class SettingsError(ValueError):
    """The application settings are missing or malformed."""


def app_version() -> str:
    """Return the version with the build commit, or ``dev`` when it is unknown."""
    sha = os.environ.get("BUILD_SHA") or os.environ.get("GITHUB_SHA") or "dev"
    return f"{_VERSION} ({sha})"


def _json_response(body: Any, status: int) -> Response:
    return Response(
        json.dumps(body, separators=(",", ":")),
        status=status,
        content_type="application/json",
    )


def _error_response(error: BaseException) -> Response:
    """Answer an error the handlers did not turn into a response."""
    logger.error("Unhandled error: %r", error, exc_info=error)
    return Response(b"", status=500)


def _lookup_bond(service: BondsService, params: GetBondPathParams) -> Response:
    try:
        raise RuntimeError("Failed to get bond") from RuntimeError("TEST")
    except RuntimeError as exc:
        return _error_response(exc)


def _bond_csv(service: BondsService, params: GetBondCsvPathParams) -> Response:
    bond = service.get_bond(BondId(params.id))
    if bond is None:
        body = GetBond404Response(f"Bond with ID {params.id} not found")
        return _json_response(body.to_dict(), 404)
    return Response(bond.to_csv(), status=200, content_type="text/csv")


def create_app(service: BondsService) -> Flask:
    """Build the web application answering from ``service``."""
    app = Flask(_APP_NAME)
    app.extensions[_SERVICE_KEY] = service

    @app.get("/bonds")
    def get_bonds() -> Response:
        names = [bond_id.value() for bond_id in service.get_bonds()]
        return _json_response(names, 200)

    @app.get("/bonds/<bond_id>")
    def get_bond(bond_id: str) -> Response:
        return _lookup_bond(service, GetBondPathParams(id=bond_id))

    @app.get("/bonds/<bond_id>/csv")
    def get_bond_csv(bond_id: str) -> Response:
        return _bond_csv(service, GetBondCsvPathParams(id=bond_id))

    return app


def create_app_from_settings(settings: Mapping[str, Any] | None) -> Flask:
    """Build the application from settings naming the bonds workbook.

    Raises SettingsError for missing or malformed settings and BondsReadError
    when the workbook cannot be read.
    """
    if settings is None:
        raise SettingsError("Setting key in settings not found")
    if "bonds_location" not in settings:
        raise SettingsError("Setting->bonds_location setting not found")
    location = settings["bonds_location"]
    if not isinstance(location, str):
        raise SettingsError("Setting->bonds_location is not a string")
    try:
        service = BondsService.load(location)
    except BondsReadError as exc:
        raise BondsReadError("Failed to create BondsService") from exc
    return create_app(service)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=_APP_NAME, description="Serve bond values over HTTP.")
    parser.add_argument("--version", action="store_true", help="print the version and exit")
    parser.add_argument("--bonds-location", help="path of the bonds workbook (.xls)")
    parser.add_argument("--host", default="localhost", help="address to listen on")
    parser.add_argument("--port", type=int, default=5150, help="port to listen on")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Start the server; return the process exit status."""
    parser = _parser()
    args = parser.parse_args(argv)
    if args.version:
        print(f"{_APP_NAME} {app_version()}")
        return 0
    settings = {"bonds_location": args.bonds_location} if args.bonds_location else {}
    try:
        app = create_app_from_settings(settings)
    except (SettingsError, BondsReadError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    app.run(host=args.host, port=args.port)
    return 0