# run_uvicorn.py
# Local launcher: builds the app once and serves it on the configured port.
import uvicorn

from farmform.core.config import get_settings
from farmform.main import create_app

if __name__ == "__main__":
    settings = get_settings()
    app = create_app(settings)
    # reload=False: the app object is built here, not re-imported by a reloader.
    uvicorn.run(app, host="0.0.0.0", port=settings.port, reload=False)
