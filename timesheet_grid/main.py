import logging

import uvicorn

from timesheet_grid.config import load_config
from timesheet_grid.logging_config import setup_logging


# ruff: noqa: D103
def main() -> None:
    config = load_config()
    setup_logging(log_dir=config["LOG_DIR"])
    logger = logging.getLogger(__name__)
    logger.info("Starting Timesheet Grid API")

    uvicorn.run(
        "timesheet_grid.api.main:app",
        host=config["HOST"],
        port=config["PORT"],
        log_config=None,
    )


if __name__ == "__main__":
    main()
