# backend/main.py
import os

from app.core.lifespan import lifespan
from app.api import api_router
from app.core.middleware import setup_middleware
from fastapi import FastAPI


app = FastAPI(
    title="VibeSolver Export API",
    version="1.0.0",
    description="Export AWS architecture solutions as PDF, images, JSON, YAML, Markdown and Terraform",
    lifespan=lifespan
)

# Setup middleware
setup_middleware(app)

# Register API routes (/api/health, /export/generate, /metrics)
app.include_router(api_router)

# ---------- Run ----------

if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        log_level="info"
    )
