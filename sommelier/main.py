from fastapi import FastAPI
import logging
from sommelier.core.config import settings
from sommelier.api import auth, health, menus, pairings

logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(title=settings.PROJECT_NAME)

# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(menus.router)
app.include_router(pairings.router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
