"""
Run the service:

    python -m twofa_core
"""

import uvicorn

from twofa_core.api import create_app
from twofa_core.config import AuthConfig
from twofa_core.logging_config import setup_logging


def main() -> None:
    config = AuthConfig.from_env()
    setup_logging(config.service_name, level=config.log_level, json_output=config.log_json)
    app = create_app(config)
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_config=None,  # keep our handlers
    )


if __name__ == "__main__":
    main()
