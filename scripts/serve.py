import os

import uvicorn


def main() -> None:
    """Serve the chat API; settings come from the environment and `.env`."""
    uvicorn.run(
        "pdf_chat.api:create_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
    )


if __name__ == "__main__":
    main()
