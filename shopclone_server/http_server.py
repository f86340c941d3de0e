"""HTTP server for the ShopClone storefront client."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .config import Settings
from .exceptions import (
    CheckoutInProgressError,
    EmptyCartError,
    ProductNotFoundError,
    ShopCloneError,
    StorefrontAPIError,
    SubmissionInProgressError,
    ValidationError,
)
from .store import Storefront

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("shopclone-http-server")

# Global state
storefront: Storefront


def build_storefront() -> Storefront:
    """Create the storefront controller for this process."""
    return Storefront(settings=Settings.from_env())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    global storefront

    # Startup
    logger.info("Starting ShopClone HTTP Server...")
    storefront = build_storefront()
    await storefront.start()

    yield

    # Shutdown
    logger.info("Shutting down ShopClone HTTP Server...")
    await storefront.aclose()


app = FastAPI(
    title="ShopClone MCP Server",
    description="HTTP API for browsing the ShopClone catalog, managing a cart and placing orders",
    version="0.1.0",
    lifespan=lifespan,
)


# Request/Response Models
class AddToCartRequest(BaseModel):
    product: str


class AddProductRequest(BaseModel):
    title: Optional[str] = None
    price: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None
    buy_url: Optional[str] = None
    description: Optional[str] = None


def backend_status(error: StorefrontAPIError) -> int:
    """Pass backend client errors through; everything else is a bad gateway."""
    return error.status_code if 400 <= error.status_code < 500 else 502


def error_status(error: Optional[ShopCloneError]) -> int:
    """HTTP status for the failure recorded by the storefront controller."""
    if isinstance(error, (ValidationError, EmptyCartError)):
        return 400
    if isinstance(error, ProductNotFoundError):
        return 404
    if isinstance(error, (CheckoutInProgressError, SubmissionInProgressError)):
        return 409
    if isinstance(error, StorefrontAPIError):
        return backend_status(error)
    return 502


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "ShopClone MCP Server",
        "version": "0.1.0",
        "description": "HTTP API for browsing the ShopClone catalog, managing a cart and placing orders",
        "mcp_compatible": True,
        "backend_url": storefront.client.settings.backend_url,
        "endpoints": {
            "docs": "/docs",
            "health": "/health",
            "products": {
                "list": "GET /products?q=&category=",
                "seed": "POST /products/seed",
                "create": "POST /products",
                "buy": "GET /products/{product}/buy",
            },
            "cart": {"get": "GET /cart", "add": "POST /cart/add", "checkout": "POST /cart/checkout"},
            "mcp": {"tools": "GET /mcp/tools"},
        },
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "catalog_error": storefront.catalog.error,
        "cart_items": storefront.cart.item_count,
    }


# Product endpoints
@app.get("/products")
async def list_products(q: Optional[str] = None, category: Optional[str] = None):
    """List products for the given search text and category."""
    await storefront.catalog.set_filters(query=q or "", category=category or "")

    if storefront.catalog.error:
        raise HTTPException(status_code=502, detail=storefront.catalog.error)

    products = storefront.catalog.products
    return {
        "count": len(products),
        "query": storefront.catalog.query,
        "category": storefront.catalog.category,
        "needs_seed": storefront.catalog.needs_seed,
        "products": [product.model_dump(mode="json") for product in products],
    }


@app.post("/products/seed")
async def seed_products():
    """Populate demo products and reload the catalog."""
    if not await storefront.seed_demo_data():
        raise HTTPException(status_code=502, detail=storefront.catalog.error)

    return {
        "success": True,
        "count": len(storefront.catalog.products),
    }


@app.post("/products", status_code=201)
async def add_product(request: AddProductRequest):
    """Create a new product through the add-product form."""
    storefront.form.open()
    created = await storefront.submit_product(**request.model_dump())
    if created is None:
        raise HTTPException(status_code=error_status(storefront.last_error), detail=storefront.message)

    return {
        "success": True,
        "product": created.model_dump(mode="json"),
    }


@app.get("/products/{product}/buy")
async def buy_now(product: str):
    """Get the external purchase URL of a product."""
    try:
        storefront.resolve(product)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    url = storefront.buy_now(product)
    if url is None:
        raise HTTPException(status_code=404, detail="Product has no external purchase link")
    return {"buy_url": url}


# Cart endpoints
@app.get("/cart")
async def get_cart():
    """Get the cart with derived totals."""
    return storefront.cart.summary()


@app.post("/cart/add")
async def add_to_cart(request: AddToCartRequest):
    """Add one unit of a catalog product to the cart."""
    if storefront.add_to_cart(request.product) is None:
        raise HTTPException(status_code=error_status(storefront.last_error), detail=storefront.message)

    return {
        "success": True,
        "message": storefront.message,
        "cart": storefront.cart.summary(),
    }


@app.post("/cart/checkout")
async def checkout():
    """Place an order for the cart contents."""
    confirmation = await storefront.checkout()
    if confirmation is None:
        raise HTTPException(status_code=error_status(storefront.last_error), detail=storefront.message)

    return {
        "success": True,
        "order_id": confirmation.order_id,
        "message": storefront.message,
    }


# MCP Tools endpoint (for compatibility with MCP clients over HTTP)
@app.get("/mcp/tools")
async def list_mcp_tools():
    """List available MCP tools."""
    from .server import TOOLS

    return {
        "tools": [
            {
                "name": tool.name,
                "description": tool.description,
                "input_schema": tool.inputSchema,
            }
            for tool in TOOLS
        ]
    }


def run_http_server(host: str = "0.0.0.0", port: int = 8000, reload: bool = False):
    """Run the HTTP server."""
    import uvicorn

    if reload:
        uvicorn.run("shopclone_server.http_server:app", host=host, port=port, reload=True, log_level="info")
    else:
        uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    run_http_server()
