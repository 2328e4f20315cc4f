"""Default Flask settings; override with RETIREMENT_CALCULATOR_* environment variables."""


class Config:
    CORS_ORIGINS = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]
    LOG_LEVEL = "INFO"
    # glidepath requests longer than this are rejected before simulating
    MAX_SIMULATION_YEARS = 120
