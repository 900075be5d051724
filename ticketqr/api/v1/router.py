# ticketqr/api/v1/router.py
from fastapi import APIRouter
from ticketqr.api.v1 import gate, tickets

api_router = APIRouter()

api_router.include_router(tickets.router, prefix="/tickets", tags=["tickets"])
api_router.include_router(gate.router,    prefix="/gate",    tags=["gate"])
