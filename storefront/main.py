"""Composition root for the storefront.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Adapter instantiation
- Core service initialization
- Dependency injection
- Interactive CLI loop
"""

import asyncio
import json
import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from storefront.adapters.cli.commands import CLICommandHandler
from storefront.adapters.identity.static import StaticIdentityProvider
from storefront.adapters.store.sqlite import SQLiteDatabase
from storefront.config import Settings, load_settings
from storefront.core.catalog_cache import CatalogCache
from storefront.core.checkout_service import CheckoutService
from storefront.core.home_service import HomeService
from storefront.core.ports import CheckoutPort


async def _run_cli_interactive(cli_handler: CLICommandHandler) -> None:
    """Run interactive CLI loop.

    Provides a REPL-like interface for storefront commands.

    Args:
        cli_handler: CLICommandHandler instance for executing commands.
    """
    logger = logging.getLogger(__name__)
    logger.info("Starting interactive CLI. Type 'help' for available commands or 'exit' to quit.")

    loop = asyncio.get_running_loop()

    while True:
        try:
            # Read command from stdin in a thread to avoid blocking
            command_line = await loop.run_in_executor(None, input, "storefront> ")

            command_line = command_line.strip()

            if not command_line:
                continue

            if command_line.lower() == "exit":
                logger.info("Exiting CLI")
                break

            if command_line.lower() == "help":
                _print_cli_help()
                continue

            parts = command_line.split(maxsplit=1)
            command = parts[0].lower()
            args_str = parts[1] if len(parts) > 1 else ""

            try:
                args = json.loads(args_str) if args_str else {}
            except json.JSONDecodeError:
                logger.error("Invalid JSON arguments. Use 'help' for command syntax.")
                continue

            try:
                result = await _execute_cli_command(cli_handler, command, args)
                print(json.dumps(result, indent=2, default=str))
            except ValueError as e:
                print(json.dumps({"status": "error", "message": str(e)}, indent=2))
            except Exception as e:
                logger.error(f"Command {command!r} failed: {e}", exc_info=True)
                print(json.dumps({"status": "error", "message": str(e)}, indent=2))

        except EOFError:
            # Ctrl+D to exit
            logger.info("EOF received, exiting CLI")
            break
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            continue


async def _execute_cli_command(
    cli_handler: CLICommandHandler,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Execute a CLI command.

    Args:
        cli_handler: CLICommandHandler instance.
        command: Command name.
        args: Command arguments.

    Returns:
        Command result dictionary.

    Raises:
        ValueError: If command is not recognized or arguments are missing.
    """
    if not isinstance(args, dict):
        raise ValueError(
            f"Arguments must be a JSON object, got {type(args).__name__}"
        )

    if command == "home":
        return await cli_handler.home()

    elif command == "checkout-form":
        return await cli_handler.checkout_form()

    elif command == "checkout":
        return await cli_handler.checkout(args)

    elif command == "complete":
        if "order_id" not in args:
            raise ValueError("Missing required parameter: order_id")
        try:
            order_id = int(args["order_id"])
        except (TypeError, ValueError) as e:
            raise ValueError(f"order_id must be an integer: {args['order_id']!r}") from e
        return await cli_handler.complete(order_id)

    elif command == "sign-in":
        if "username" not in args:
            raise ValueError("Missing required parameter: username")
        return cli_handler.sign_in(str(args["username"]))

    elif command == "sign-out":
        return cli_handler.sign_out()

    elif command == "invalidate":
        return cli_handler.invalidate()

    elif command == "error":
        return cli_handler.error_page()

    elif command == "status-code":
        return cli_handler.status_code_page()

    else:
        raise ValueError(f"Unknown command: {command}. Use 'help' for available commands.")


def _print_cli_help() -> None:
    """Print CLI help message."""
    help_text = """
Available Commands (JSON format):

  home
    Show the best-seller listing.

  checkout-form
    Show the empty address and payment form.

  checkout
    Submit the address and payment form as the signed-in user.
    Fields: FirstName, LastName, Address, City, State, PostalCode,
            Country, Phone, Email, PromoCode

    Example: checkout {"FirstName": "Ada", "LastName": "Lovelace", ..., "PromoCode": "FREE"}

  complete
    Show the confirmation for one of your orders.
    Required: order_id

    Example: complete {"order_id": 100}

  sign-in
    Run subsequent commands as a user.
    Required: username

    Example: sign-in {"username": "TestUserA"}

  sign-out
    Continue anonymously.

  invalidate
    Drop the cached best-seller listing.

  error / status-code
    Show the shared error or status code page.

  help
    Show this help message.

  exit
    Exit the CLI.
    """
    print(help_text)


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "name": "%(name)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def build_cli_handler(
    settings: Settings, database: SQLiteDatabase
) -> CLICommandHandler:
    """Wire core services and adapters into a CLI command handler."""
    cache = CatalogCache(
        catalog=database.catalog_store(),
        ttl_seconds=settings.catalog_cache_ttl_seconds,
    )
    home = HomeService(cache, top_selling_count=settings.top_selling_count)
    identity = StaticIdentityProvider(settings.default_username or None)

    @asynccontextmanager
    async def checkout_session() -> AsyncIterator[CheckoutPort]:
        async with database.order_store() as orders:
            yield CheckoutService(orders, promo_code=settings.promo_code)

    return CLICommandHandler(
        checkout_session=checkout_session,
        storefront=home,
        cache=cache,
        identity=identity,
    )


async def bootstrap() -> None:
    """Load configuration, wire adapters, and start the application.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Instantiate adapters with configuration
    4. Initialize core services
    5. Run the interactive CLI
    """
    settings = load_settings()

    configure_logging(
        "DEBUG" if settings.debug else settings.log_level, settings.log_format
    )
    logger = logging.getLogger(__name__)
    logger.info("Loading storefront...")

    database = SQLiteDatabase(
        db_path=settings.store_sqlite_path,
        pool_size=settings.store_pool_size,
    )
    logger.info(f"Store initialized: {settings.store_sqlite_path}")

    cli_handler = build_cli_handler(settings, database)

    try:
        await _run_cli_interactive(cli_handler)
    finally:
        await database.close_pool()


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Successful shutdown
        1: Fatal bootstrap or runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
