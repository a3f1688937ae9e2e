import logging

from config import settings
from dailysong.web_api.web_app import app


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="[%(levelname)s] %(asctime)s %(message)s",
    )
    logging.getLogger("werkzeug").setLevel(logging.ERROR)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    print(
        f"[startup] daily-song ({settings.CATALOG_PROVIDER}) ready at http://{settings.API_HOST}:{settings.API_PORT}",
        flush=True,
    )
    app.run(debug=False, use_reloader=False, port=settings.API_PORT, host=settings.API_HOST)


if __name__ == "__main__":
    main()
