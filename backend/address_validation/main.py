from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from address_validation.api.router import router
from address_validation.config import settings

app = FastAPI(
    title="address-validation API",
    version="0.1.0",
    description="Google Address Validation with quality scoring and USPS classification",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "DELETE"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}
