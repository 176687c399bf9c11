"""Command that starts the HTTP service."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from service_template import logger
from service_template.app import App
from service_template.config import Config, new_config
from service_template.logger import Field


def startup_fields(config: Config) -> list[Field]:
    """Fields that describe the application in the startup log entry."""
    return [Field("app_name", config.app_name), Field("environment", config.env)]


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Read the configuration from the environment and serve."""
    parser = argparse.ArgumentParser(
        description="Run the HTTP service; settings come from environment variables."
    )
    parser.parse_args(argv)

    config = new_config()
    logger.init_global_logger()
    logger.info(None, "Starting application", *startup_fields(config))
    App(config).start()


if __name__ == "__main__":
    main()