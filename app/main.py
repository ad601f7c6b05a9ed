from fastapi import FastAPI
from dotenv import load_dotenv

load_dotenv()

from infrastructure.metrics.metrics import metrics_endpoint
from app.routers.v1 import router

# Import database models to ensure they're registered
from infrastructure.db.models import Base, ContractModel, PaymentModel  # noqa: F401

app = FastAPI(title="finance-erp-ledger")

@app.get("/metrics")
async def metrics():
    return metrics_endpoint()

@app.get("/health")
async def health():
    return {"status": "ok", "message": "finance-erp-ledger is running"}

app.include_router(router)
