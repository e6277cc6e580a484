"""FoodDash FastAPI application.

Web server that processes commands synchronously via HTTP. Every request
runs inside the fooddash domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay:
#   - unset/"test" → in-memory stores
#   - "production" → PostgreSQL
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from fooddash.domain import fooddash
from fooddash.utils.logging import bind_request_context, clear_request_context

fooddash.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="FoodDash API",
    description="Food delivery: menu, carts, orders, deliveries and loyalty",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the fooddash domain context and bind request details to the log context."""
    bind_request_context(method=request.method, path=request.url.path)
    try:
        with fooddash.domain_context():
            return await call_next(request)
    finally:
        clear_request_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from fooddash.api import cart_router, delivery_router, loyalty_router, menu_router, order_router  # noqa: E402

app.include_router(menu_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(delivery_router)
app.include_router(loyalty_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": fooddash.name}})
