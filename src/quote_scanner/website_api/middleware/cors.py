"""CORS configuration."""

import os

# Funnel front-end origins; production domains come from QS_ALLOWED_ORIGINS
ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
] + [o.strip() for o in os.getenv("QS_ALLOWED_ORIGINS", "").split(",") if o.strip()]
