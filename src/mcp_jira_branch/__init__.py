import os
import sys

import anyio
import click
from dotenv import load_dotenv

__version__ = "0.1.0"

from .logging_config import log_operation, setup_logger

logger = setup_logger()


@click.command()
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (can be used multiple times)",
)
@click.option(
    "--env-file", type=click.Path(exists=True, dir_okay=False), help="Path to .env file"
)
@click.option(
    "--log-dir",
    help="Directory to store log files",
)
@click.option(
    "--log-to-file/--no-log-to-file",
    default=False,
    help="Enable/disable file logging",
)
@click.option(
    "--jira-base-url",
    help="Jira Server/Data Center URL (e.g., https://jira.your-company.com). "
    "Leave unset to use Jira Cloud through the Atlassian remote MCP server.",
)
@click.option("--jira-username", help="Jira username/email (for legacy API tokens)")
@click.option("--jira-token", help="Jira legacy API token (used with --jira-username)")
@click.option(
    "--jira-personal-token",
    help="Jira Personal Access Token (for Jira Server/Data Center)",
)
@click.option("--jira-cloud-id", help="Jira Cloud ID (for Jira Cloud)")
def main(
    verbose: int,
    env_file: str | None,
    log_dir: str | None,
    log_to_file: bool,
    jira_base_url: str | None,
    jira_username: str | None,
    jira_token: str | None,
    jira_personal_token: str | None,
    jira_cloud_id: str | None,
) -> None:
    """MCP Jira Branch Server - Jira tools with automatic git branch creation

    Supports both Jira Cloud and Jira Server/Data Center deployments.
    """
    logging_level = "DEBUG" if verbose >= 2 else "INFO"

    setup_logger(
        name="mcp-jira-branch",
        level=logging_level,
        log_to_file=log_to_file,
        log_dir=log_dir,
    )

    with log_operation(logger, "application_startup", app_version=__version__):
        if env_file:
            logger.info(f"Loading environment from file: {env_file}")
            load_dotenv(env_file)
        else:
            logger.debug("Attempting to load environment from default .env file")
            load_dotenv()

        if jira_base_url:
            os.environ["JIRA_BASE_URL"] = jira_base_url
        if jira_username:
            os.environ["JIRA_USERNAME"] = jira_username
        if jira_token:
            os.environ["JIRA_API_TOKEN"] = jira_token
        if jira_personal_token:
            os.environ["JIRA_PERSONAL_ACCESS_TOKEN"] = jira_personal_token
        if jira_cloud_id:
            os.environ["JIRA_CLOUD_ID"] = jira_cloud_id

    from .servers import run_server

    logger.info(f"Starting MCP Jira Branch v{__version__} with stdio transport")
    try:
        anyio.run(run_server)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


__all__ = ["main", "__version__", "setup_logger", "log_operation"]

if __name__ == "__main__":
    main()
