from fastapi import APIRouter

from app.rendering.templates import get_template_cache

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the resume service.")
async def health_check():
    source = get_template_cache().source_path
    return {"status": "healthy", "template_loaded": source is not None}
