import uvicorn

from discdb_api.config import load_settings

if __name__ == "__main__":
    settings = load_settings()
    uvicorn.run("discdb_api.main:app", host=settings.host, port=settings.port,
                log_level=settings.log_level.lower())
