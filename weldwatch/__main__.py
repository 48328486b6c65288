import os

import uvicorn


def main() -> None:
    env = os.getenv("APP_ENV", "development").lower()
    uvicorn.run(
        "weldwatch.main:app",
        host=os.getenv("APP_HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=env == "development",
        log_level=os.getenv("APP_LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
