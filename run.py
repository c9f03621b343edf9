import os
from dotenv import load_dotenv
from steam_games_list import configure_logging, create_app

# Load environment variables from .env file
load_dotenv()

configure_logging(os.getenv("LOG_LEVEL", "INFO"))

app = create_app()

if __name__ == "__main__":
    app.run(debug=True, port=int(os.getenv("PORT", "3001")))
