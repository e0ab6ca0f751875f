"""Server startup script."""
import os
import uvicorn

if __name__ == "__main__":
    # Hosting platforms set PORT; default to 8000 locally
    port = int(os.environ.get("PORT", 8000))
    print(f"Starting server on port {port}...")
    uvicorn.run(
        "backend.app.main:app",
        host="0.0.0.0",
        port=port,
        log_level="info"
    )
