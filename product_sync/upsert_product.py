# upsert_product.py
from typing import Optional
import logging

from postgrest.exceptions import APIError
from supabase import Client

from . import change_log
from .reconcile import reconcile
from .schema import Product, UpsertResponse

logger = logging.getLogger(__name__)

# PostgREST code for `.single()` matching zero rows
NOT_FOUND_CODE = "PGRST116"


class ProductGateway:
    """
    Reads and writes rows of the Supabase products table, keyed on `id`.
    """

    def __init__(self, client: Client, table: str = "products") -> None:
        self.client = client
        self.table = table

    def fetch(self, product_id: str) -> Optional[Product]:
        """
        Return the stored product, or None when no row has this id.

        Any other PostgREST error is raised.
        """
        try:
            response = (
                self.client.table(self.table)
                .select("*")
                .eq("id", product_id)
                .single()
                .execute()
            )
        except APIError as e:
            if e.code == NOT_FOUND_CODE:
                return None
            raise

        data = getattr(response, "data", None)
        return Product.model_validate(data) if data else None

    def insert(self, product: Product) -> None:
        self.client.table(self.table).insert(product.to_record()).execute()

    def upsert(self, product: Product) -> None:
        (
            self.client.table(self.table)
            .upsert(product.to_record(), on_conflict="id")
            .execute()
        )


def upsert_product(scraped: Product, gateway: ProductGateway) -> UpsertResponse:
    """
    Insert a new product or merge it into its stored row.

    Returns how the row was changed, or UpsertResponse.Failed when the
    lookup or the write raised. Errors are logged, never raised.
    """
    try:
        stored = gateway.fetch(scraped.id)
    except Exception as e:
        logger.exception("Supabase lookup failed for product %s", scraped.id)
        change_log.log_error(f"  Lookup failed: {scraped.id} - {e}")
        return UpsertResponse.Failed

    response = reconcile(scraped, stored)

    try:
        if stored is None:
            gateway.insert(response.product)
        else:
            gateway.upsert(response.product)
    except Exception as e:
        logger.exception("Supabase write failed for product %s", scraped.id)
        change_log.log_error(f"  Write failed: {scraped.id} - {e}")
        return UpsertResponse.Failed

    if stored is None:
        change_log.log_new_product(response.product)

    logger.debug("Product %s -> %s", scraped.id, response.upsert_type.value)
    return response.upsert_type
