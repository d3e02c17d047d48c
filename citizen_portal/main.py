# Entry point for uvicorn: `uvicorn citizen_portal.main:app --port 5000`
from dotenv import load_dotenv

load_dotenv()

from citizen_portal.app_factory import create_app  # noqa: E402

app = create_app()
