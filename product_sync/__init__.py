from .schema import DatedPrice, Product, ProductResponse, UpsertResponse

__all__ = ["DatedPrice", "Product", "ProductResponse", "UpsertResponse"]
