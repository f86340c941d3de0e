"""MCP Server for the ShopClone storefront."""

import asyncio
import json
import logging
from typing import Any, Optional

from mcp.server import Server
from mcp.types import Resource, TextContent, Tool
from pydantic import AnyUrl

from .config import Settings
from .exceptions import ProductNotFoundError
from .models import Product
from .store import Storefront

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("shopclone-mcp-server")

# Initialize server
app = Server("shopclone-mcp-server")

# Global state
storefront: Storefront


def format_product(index: int, product: Product) -> list[str]:
    """Listing lines for one product."""
    lines = [f"\n{index}. {product.title}"]
    if product.id is not None:
        lines.append(f"   ID: {product.id}")
    lines.append(f"   Price: ${product.price:.2f}")
    lines.append(f"   Category: {product.category}")
    lines.append(f"   Rating: {product.stars} {product.display_rating:.1f}")
    if product.description:
        lines.append(f"   {product.description}")
    if product.buy_url:
        lines.append(f"   Buy now: {product.buy_url}")
    return lines


def format_catalog(products: tuple[Product, ...]) -> str:
    if not products:
        return "No products found. Use shopclone_seed_products to load demo products."

    result_lines = [f"Found {len(products)} product(s):"]
    for i, product in enumerate(products, 1):
        result_lines.extend(format_product(i, product))
    return "\n".join(result_lines)


def text(message: str) -> list[TextContent]:
    return [TextContent(type="text", text=message)]


@app.list_resources()
async def list_resources() -> list[Resource]:
    """List available resources."""
    return [
        Resource(
            uri=AnyUrl("shopclone://cart"),
            name="Shopping Cart",
            mimeType="application/json",
            description="Current cart contents with subtotal, shipping, taxes and total",
        ),
        Resource(
            uri=AnyUrl("shopclone://products"),
            name="Catalog",
            mimeType="application/json",
            description="Products for the current search and category",
        ),
    ]


@app.read_resource()
async def read_resource(uri: AnyUrl) -> str:
    """Read a resource by URI."""
    uri_str = str(uri)

    if uri_str == "shopclone://cart":
        return json.dumps(storefront.cart.summary(), indent=2)

    elif uri_str == "shopclone://products":
        await storefront.start()
        return json.dumps([p.model_dump(mode="json") for p in storefront.catalog.products], indent=2)

    raise ValueError(f"Unknown resource: {uri}")


TOOLS = [
    Tool(
        name="shopclone_search_products",
        description="List products, optionally filtered by search text and category",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search text (empty for everything)",
                },
                "category": {
                    "type": "string",
                    "description": "Category, e.g. 'Electronics', 'Home', 'Outdoors' (empty for all)",
                },
            },
        },
    ),
    Tool(
        name="shopclone_seed_products",
        description="Load demo products into the backend and refresh the catalog",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name="shopclone_add_to_cart",
        description="Add one unit of a product from the current catalog to the cart",
        inputSchema={
            "type": "object",
            "properties": {
                "product": {
                    "type": "string",
                    "description": "Product ID or exact title from search results",
                },
            },
            "required": ["product"],
        },
    ),
    Tool(
        name="shopclone_get_cart",
        description="Show the cart with subtotal, shipping, taxes and total",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name="shopclone_checkout",
        description="Place an order for everything in the cart",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name="shopclone_add_product",
        description="Create a new product in the backend",
        inputSchema={
            "type": "object",
            "properties": {
                "title": {"type": "string", "description": "Product title"},
                "price": {"type": "string", "description": "Price, e.g. '19.99'"},
                "category": {"type": "string", "description": "Category (default: Other)"},
                "image": {"type": "string", "description": "Image URL"},
                "buy_url": {"type": "string", "description": "External purchase URL"},
                "description": {"type": "string", "description": "Description"},
            },
            "required": ["title", "price"],
        },
    ),
    Tool(
        name="shopclone_buy_now",
        description="Get the external purchase link of a product",
        inputSchema={
            "type": "object",
            "properties": {
                "product": {
                    "type": "string",
                    "description": "Product ID or exact title from search results",
                },
            },
            "required": ["product"],
        },
    ),
]


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return TOOLS


@app.call_tool()
async def call_tool(name: str, arguments: Any) -> list[TextContent]:
    """Handle tool calls."""
    arguments = arguments or {}
    try:
        await storefront.start()

        if name == "shopclone_search_products":
            query: Optional[str] = arguments.get("query")
            category: Optional[str] = arguments.get("category")
            await storefront.catalog.set_filters(
                query=query if query is not None else "",
                category=category if category is not None else "",
            )

            if storefront.catalog.error:
                return text(f"❌ {storefront.catalog.error}")
            return text(format_catalog(storefront.catalog.products))

        elif name == "shopclone_seed_products":
            if not await storefront.seed_demo_data():
                return text(f"❌ {storefront.catalog.error or 'Seeding failed'}")
            return text(f"✅ Demo products loaded\n\n{format_catalog(storefront.catalog.products)}")

        elif name == "shopclone_add_to_cart":
            product_ref = arguments.get("product")
            if not product_ref:
                return text("Error: product parameter required")

            line = storefront.add_to_cart(str(product_ref))
            if line is None:
                return text(f"❌ {storefront.message}")
            return text(f"✅ {storefront.message}\n\n{storefront.cart.render()}")

        elif name == "shopclone_get_cart":
            return text(storefront.cart.render())

        elif name == "shopclone_checkout":
            confirmation = await storefront.checkout()
            if confirmation is None:
                return text(f"❌ {storefront.message}")
            return text(f"✅ {storefront.message}")

        elif name == "shopclone_add_product":
            fields = {
                key: str(arguments[key])
                for key in ("title", "price", "category", "image", "buy_url", "description")
                if arguments.get(key) is not None
            }
            storefront.form.open()
            created = await storefront.submit_product(**fields)
            if created is None:
                return text(f"❌ {storefront.message}")
            return text(f"✅ {storefront.message}")

        elif name == "shopclone_buy_now":
            product_ref = arguments.get("product")
            if not product_ref:
                return text("Error: product parameter required")

            try:
                storefront.resolve(str(product_ref))
            except ProductNotFoundError as e:
                return text(f"❌ {e}")

            url = storefront.buy_now(str(product_ref))
            if url is None:
                return text("This product has no external purchase link")
            return text(f"Buy now: {url}")

        else:
            return text(f"Unknown tool: {name}")

    except Exception as e:
        logger.error(f"Error executing tool {name}: {e}", exc_info=True)
        return text(f"Error: {str(e)}")


async def main(settings: Optional[Settings] = None) -> None:
    """Main entry point."""
    global storefront

    settings = settings or Settings.from_env()
    storefront = Storefront(settings=settings)

    logger.info("Starting ShopClone MCP Server...")

    # Import and run the server
    from mcp.server.stdio import stdio_server

    try:
        async with stdio_server() as (read_stream, write_stream):
            await app.run(
                read_stream,
                write_stream,
                app.create_initialization_options(),
            )
    finally:
        await storefront.aclose()


if __name__ == "__main__":
    asyncio.run(main())
