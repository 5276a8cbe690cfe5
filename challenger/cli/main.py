#!/usr/bin/env python3
"""
Challenger CLI - Command Line Interface

- challenger run   : Challenge one game and follow it until the proposer is rewarded
- challenger scan  : Report the game that would be challenged, without sending anything
- challenger bond  : Print the challenger bond for the configured game type

Required environment variables (or entries in the env file):
  L1_RPC, FACTORY_ADDRESS, GAME_TYPE, PRIVATE_KEY

Optional:
  FETCH_INTERVAL, MAX_GAMES_TO_CHECK_FOR_CHALLENGE, POLL_INTERVAL,
  BLOCKSCOUT_ADDRESS, RESOLUTION_TIMEOUT, RECEIPT_TIMEOUT, RPC_TIMEOUT, RPC_RETRIES
"""

import asyncio
import sys

import click
from eth_utils import from_wei

from challenger.config import ConfigError, load_config
from challenger.core.setup import logger, setup_logging
from challenger.engine.service import ChallengerService
from challenger.utils.errors import BondUnavailable, ChallengeUnconfirmed, QueryFailure, ResolutionTimeout
from challenger.utils.rpc_client import RpcSessionManager

env_file_option = click.option(
    "--env-file",
    default=".env",
    show_default=True,
    help="Environment file to load",
)


def _build_service(env_file: str) -> ChallengerService:
    try:
        config = load_config(env_file)
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)
    return ChallengerService.from_config(config)


async def _with_session(coro):
    try:
        return await coro
    finally:
        await RpcSessionManager.close()


@click.group()
@click.option(
    "-v", "--verbosity",
    count=True,
    help="Increase logging verbosity (-v=INFO, -vv=DEBUG, -vvv=TRACE)"
)
def cli(verbosity):
    """
    Dispute game challenger.

    Logs at INFO by default; use -vv or -vvv for DEBUG and TRACE.
    """
    setup_logging(min(max(verbosity, 1), 3))


@cli.command()
@env_file_option
def run(env_file):
    """Challenge one game and track it to resolution."""
    service = _build_service(env_file)
    try:
        outcome = asyncio.run(_with_session(service.run()))
    except BondUnavailable as e:
        logger.error(f"Failed to get challenger bond: {e}")
        sys.exit(1)
    except (ChallengeUnconfirmed, ResolutionTimeout) as e:
        logger.error(str(e))
        sys.exit(2)
    except KeyboardInterrupt:
        service.stop()
        sys.exit(130)

    if outcome is None:
        sys.exit(1)
    logger.info(
        f"Challenge cycle complete for game {outcome.game.address} "
        f"({len(outcome.events)} resolution transactions)"
    )


@cli.command()
@env_file_option
def scan(env_file):
    """Find the game that would be challenged next (dry run)."""
    service = _build_service(env_file)
    try:
        game = asyncio.run(_with_session(service.scanner.scan()))
    except QueryFailure as e:
        logger.error(f"Scan failed: {e}")
        sys.exit(1)
    if game is None:
        click.echo("No challengeable game")
        sys.exit(3)
    click.echo(f"{game.index} {game.address}")


@cli.command()
@env_file_option
def bond(env_file):
    """Print the challenger bond for the configured game type."""
    service = _build_service(env_file)
    try:
        amount = asyncio.run(_with_session(service.bond_resolver.bond_for(service.game_type)))
    except BondUnavailable as e:
        logger.error(str(e))
        sys.exit(1)
    click.echo(f"{amount} wei ({from_wei(amount, 'ether')} ETH)")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
