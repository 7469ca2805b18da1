import uvicorn

from user_api.config import settings


def main() -> None:
    uvicorn.run("user_api.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
