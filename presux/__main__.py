"""``python -m presux`` starts the API with uvicorn on the configured host and port."""

import uvicorn

from .core.config import settings


def main() -> None:
    uvicorn.run("presux.main:app", host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
