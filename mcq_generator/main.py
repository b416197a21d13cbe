from dotenv import load_dotenv

from mcq_generator.app import configure_logging, create_app
from mcq_generator.config import Settings

# Load environment variables
load_dotenv()

settings = Settings()
configure_logging(settings.log_level)
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
