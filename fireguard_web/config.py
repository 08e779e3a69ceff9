import os
from dotenv import load_dotenv

load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), '..', '.env'))

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000/api")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))

# Keys under which session tokens live in st.session_state
ADMIN_TOKEN_KEY = "admin_token"
USER_TOKEN_KEY = "user_token"
