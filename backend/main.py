"""FastAPI application relaying geolocated questions to Gemini."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

import config
from gemini import GeminiClient, RelayResult
from models import GenerateRequest

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

gemini_client = GeminiClient(config.load_gemini_config())


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not gemini_client.config.api_key:
        logger.warning("GEMINI_API_KEY is not set; Gemini will reject requests")
    logger.info("Relaying to %s", gemini_client.config.url)
    yield


app = FastAPI(title="Gemini Geo Relay", version="1.0.0", lifespan=lifespan)

# CORS: only the map frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=config.CORS_METHODS,
    allow_headers=["*"],
)


def get_gemini_client() -> GeminiClient:
    return gemini_client


def compose_prompt(request: GenerateRequest) -> str:
    return (
        f"Latitude: {request.latitude}, Longitude: {request.longitude}, "
        f"Radius: {request.radius} meters. Question: {request.prompt}"
    )


def status_for(result: RelayResult) -> int:
    """Genuine answers are 200; every provider-side failure is a 502."""
    return 200 if result.ok else 502


# ---------- Health check ----------

@app.get("/health")
async def health():
    return {"status": "ok"}


# ---------- Gemini ----------

@app.post("/api/gemini/generate", response_class=PlainTextResponse)
def generate(request: GenerateRequest, client: GeminiClient = Depends(get_gemini_client)):
    full_prompt = compose_prompt(request)
    logger.info("Request full prompt: %s", full_prompt)

    result = client.relay(full_prompt)
    logger.info("Generated response (%s): %s", result.kind.value, result.text)

    return PlainTextResponse(result.text, status_code=status_for(result))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT)
