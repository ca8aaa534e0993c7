"""开发服务器入口 -- python -m taskboard.gateway"""

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "taskboard.gateway.main:app",
        host=os.environ.get("TASKBOARD_HOST", "127.0.0.1"),
        port=int(os.environ.get("TASKBOARD_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
