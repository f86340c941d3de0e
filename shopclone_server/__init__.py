"""ShopClone storefront client with MCP and HTTP surfaces."""

__version__ = "0.1.0"
