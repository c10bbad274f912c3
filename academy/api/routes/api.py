from fastapi import APIRouter

router = APIRouter()


@router.get("/health", tags=["Health Check"])
async def health_check():
    return {"status": "ok"}
