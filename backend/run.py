"""Run the API with uvicorn using the host and port from the environment."""

import uvicorn

from backend.core import config


def main() -> None:
    uvicorn.run('backend.main:app', host=config.HOST, port=config.PORT, reload=config.RELOAD, log_level='info')


if __name__ == '__main__':
    main()
