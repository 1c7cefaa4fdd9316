from dotenv import load_dotenv

# Load environment variables before the judge modules read their settings
load_dotenv()

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from models import HealthResponse  # noqa: E402
from execution import JudgeRequest, JudgeResponse, execute_code  # noqa: E402
from execution.sandbox import is_docker_available  # noqa: E402
from questions import question_store  # noqa: E402
import asyncio  # noqa: E402
import logging  # noqa: E402
import os  # noqa: E402

"""
FastAPI server for the code execution judge
Runs submissions in Docker sandboxes and grades them against stored test cases
"""

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Code Execution Judge",
    description="Sandboxed execution and grading of code submissions",
    version="0.1.0"
)

# CORS middleware to allow requests from frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint
    Returns the service status and whether the sandbox runtime is usable
    """
    sandbox_ready = await asyncio.to_thread(is_docker_available)
    return HealthResponse(status="ok", version="0.1.0", sandbox=sandbox_ready)


@app.post("/api/execute", response_model=JudgeResponse)
async def execute(request: JudgeRequest):
    """
    Judge a code submission

    Args:
        request: Language, code, question id and optional custom input

    Returns:
        JudgeResponse with the verdict and the per-case trace log
    """
    return await execute_code(request, question_store.get)


if __name__ == "__main__":
    import uvicorn

    # Get port from environment or default to 8001
    port = int(os.getenv("PORT", 8001))

    logger.info(f"Starting judge on port {port}")
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=port,
        log_level="info",
        access_log=True
    )
