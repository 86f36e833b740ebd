from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import create_tables, async_session
from app.dependencies import get_current_user
from app.seed import seed_data
from app.routers.auth import router as auth_router
from app.routers.cars import router as cars_router
from app.routers.clients import router as clients_router
from app.routers.orders import router as orders_router
from app.routers.users import router as users_router
from app.utils.exceptions import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    async with async_session() as session:
        await seed_data(session)
    yield


app = FastAPI(
    title="Vehicle Rental API",
    description="Backend de locação de veículos: usuários, clientes, carros e pedidos",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

_auth_dep = [Depends(get_current_user)]

app.include_router(auth_router)
app.include_router(users_router, dependencies=_auth_dep)
app.include_router(clients_router, dependencies=_auth_dep)
app.include_router(cars_router, dependencies=_auth_dep)
app.include_router(orders_router, dependencies=_auth_dep)


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "vehicle-rental-api", "version": "0.1.0"}
