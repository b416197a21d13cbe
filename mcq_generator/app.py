import logging
from typing import Any, Optional

from fastapi import Body, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from mcq_generator import __version__
from mcq_generator.clients import build_client
from mcq_generator.config import Settings
from mcq_generator.exceptions import MCQGeneratorError, UpstreamError
from mcq_generator.services import ClientFactory, MCQService


logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=level
    )


def create_app(settings: Settings, client_factory: ClientFactory = build_client) -> FastAPI:
    app = FastAPI(
        title="MCQ Generator API",
        description="Generate multiple choice questions with a large language model",
        version=__version__
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    service = MCQService(settings, client_factory)
    app.state.service = service

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        # Only reachable for bodies that are not valid JSON
        return JSONResponse(status_code=400, content={"error": "Request body must be valid JSON."})

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "MCQ Generator API is running!"

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    @app.post("/generate")
    async def generate(
        payload: Any = Body(None),
        authorization: Optional[str] = Header(None),
        openai_token: Optional[str] = Header(None),
    ):
        """
        Generate a fixed number of MCQs from the given parameters

        - **subject** / **book** / **chapter**: at least one is required
        - **difficulty**, **country**, **language**: optional, defaulted
        """
        try:
            result = await service.generate(
                payload,
                authorization=authorization,
                provider_token=openai_token,
            )
        except UpstreamError as e:
            logger.error("Generate MCQ error: %s", e.detail)
            return JSONResponse(status_code=e.status_code, content=e.body())
        except MCQGeneratorError as e:
            return JSONResponse(status_code=e.status_code, content=e.body())
        except Exception as e:
            logger.exception("Generate MCQ error")
            return JSONResponse(
                status_code=500,
                content={"error": "Internal server error", "detail": str(e)},
            )

        records = [record.model_dump() for record in result.records]
        if not settings.variant.report_usage:
            return records
        return {
            "success": True,
            "token_usage": result.token_usage.as_dict() if result.token_usage else None,
            "data": records,
        }

    return app
