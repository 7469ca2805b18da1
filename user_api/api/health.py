from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
def health_check():
    """Check if the API server is running."""
    return {"status": "ok"}
