"""
Tests for the ShopClone storefront client.

The backend is faked in-process; see conftest.FakeBackend.
"""
