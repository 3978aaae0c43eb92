"""Development entrypoint delegating to the application package."""

import logging

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from intake.config import load_settings
from intake.main import create_app

settings = load_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
# Every notification request would otherwise log its connection setup.
logging.getLogger("urllib3").setLevel(logging.WARNING)

app = create_app(settings)


if __name__ == "__main__":
    base_url = f"http://localhost:{settings.port}"
    app.logger.info("Lead form: %s/lead-gen.html", base_url)
    app.logger.info("Diagnosis form: %s/", base_url)
    app.logger.info("Admin dashboard: %s/admin.html", base_url)
    app.run(host=settings.host, port=settings.port, threaded=True)
