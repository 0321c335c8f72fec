from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

import requests
from rich.console import Console

from config import DEFAULT_ENV_FILE, MissingApiKeyError, SettingsError, load_settings
from services.converter_session import ConversionForm, ConverterSession, ExitCode
from services.open_exchange_rates_client import OpenExchangeRatesClient
from ui.console_form import ConsoleConversionForm

logger = logging.getLogger(__name__)


def run(
    env_file: Path = DEFAULT_ENV_FILE,
    *,
    console: Console | None = None,
    form: ConversionForm | None = None,
    http_session: requests.Session | None = None,
) -> ExitCode:
    console = console or Console()
    try:
        settings = load_settings(env_file)
    except MissingApiKeyError as exc:
        console.print(str(exc))
        return ExitCode.CONFIG_ERROR
    except SettingsError as exc:
        console.print(f"Error loading configuration: {exc}")
        return ExitCode.CONFIG_ERROR

    client = OpenExchangeRatesClient(
        app_id=settings.key,
        base_url=settings.oxr_base_url,
        timeout=settings.oxr_timeout,
        session=http_session,
    )
    with client:
        session = ConverterSession(
            form=form or ConsoleConversionForm(console=console),
            rates_provider=client,
            console=console,
        )
        exit_code = session.run()
    logger.info("Session finished with %s", exit_code.name)
    return exit_code


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Convert between currencies using Open Exchange Rates.")
    parser.add_argument("--env-file", type=Path, default=DEFAULT_ENV_FILE, help="dotenv file holding KEY")
    parser.add_argument("--verbose", action="store_true", help="log requests and lookups to stderr")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )
    return int(run(args.env_file))


if __name__ == "__main__":
    sys.exit(main())
