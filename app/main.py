import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.data.repositories.alert_log_repository import create_alert_log_table
from app.presentation.budgets_api import router as budgets_router
from app.presentation.expenses_api import router as expenses_router
from app.presentation.insights_api import router as insights_router
from app.presentation.investments_api import router as investments_router
from app.presentation.salary_api import router as salary_router
from app.presentation.user_api import router as auth_router

load_dotenv()  # Load environment variables from .env

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Expense Tracker API", version="1.0.0")

cors_origins = os.getenv("CORS_ORIGINS", "")
origins = [origin.strip() for origin in cors_origins.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(expenses_router)
app.include_router(budgets_router)
app.include_router(salary_router)
app.include_router(investments_router)
app.include_router(insights_router)

# Ensure alert log table exists at startup
create_alert_log_table()
