from fastapi import APIRouter

from app.api.routes import auth, orders, trains, passengers

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])  # POST /session
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])  # draft composition, POST /, GET /{order_id}
api_router.include_router(trains.router, prefix="/trains", tags=["trains"])  # GET /, GET /dates, GET /{train_number}
api_router.include_router(passengers.router, prefix="/passengers", tags=["passengers"])  # GET /, POST /, PUT/DELETE /{id}
