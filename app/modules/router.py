# app/modules/router.py
from fastapi import APIRouter
from app.modules.notebook.api.router import v1 as notebook_router

router = APIRouter()
router.include_router(notebook_router)
