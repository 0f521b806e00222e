import os

from src.operations_hub.operations_hub.core.constants import DEFAULT_API_PORT
from src.operations_hub.operations_hub.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", DEFAULT_API_PORT)), debug=app.config["DEBUG"])
