from fastapi import APIRouter

from carenav.api.v1.chat import router as chat_router
from carenav.api.v1.documents import router as documents_router
from carenav.api.v1.generate import router as generate_router
from carenav.api.v1.issues import router as issues_router
from carenav.api.v1.leads import router as leads_router

v1_router = APIRouter()

v1_router.include_router(issues_router)
v1_router.include_router(chat_router)
v1_router.include_router(generate_router)
v1_router.include_router(documents_router)
v1_router.include_router(leads_router)
