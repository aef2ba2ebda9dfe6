"""Tourism asset API endpoints."""

import json
import logging
from typing import Dict

from litestar import Controller, MediaType, Request, get, post
from litestar.status_codes import HTTP_200_OK
from sqlalchemy.exc import SQLAlchemyError

from wayamba.api.forms import read_fields, read_image
from wayamba.auth import asset_upload_guard, require_admin_guard
from wayamba.errors import ServiceUnavailable, ValidationError
from wayamba.services import AssetCatalog
from wayamba.utils.logging import error_log

logger = logging.getLogger("Wayamba.assets")


class AssetsController(Controller):
    """Public asset map data plus asset uploads."""

    path = "/api"
    tags = ["assets"]

    @get("/assets")
    async def list_assets(self, asset_catalog: AssetCatalog) -> dict:
        """All tourism assets as a GeoJSON FeatureCollection."""
        try:
            return await asset_catalog.feature_collection()
        except SQLAlchemyError as e:
            error_log("Database error fetching assets", exc=e)
            raise ServiceUnavailable("Failed to retrieve tourism assets")

    @get("/stats/category-distribution")
    async def category_distribution(self, asset_catalog: AssetCatalog) -> Dict[str, int]:
        """Number of assets per category."""
        try:
            return await asset_catalog.category_distribution()
        except SQLAlchemyError as e:
            error_log("Database error fetching category distribution", exc=e)
            raise ServiceUnavailable("Failed to retrieve category distribution")

    @post(
        "/upload-asset",
        guards=[asset_upload_guard],
        status_code=HTTP_200_OK,
        media_type=MediaType.TEXT,
    )
    async def upload_asset(self, request: Request, asset_catalog: AssetCatalog) -> str:
        """Create one asset from form fields name, category, description, lat, lng (+ ``dataFile`` photo)."""
        fields, files = await read_fields(request)
        image = await read_image(files.get("dataFile"))

        await asset_catalog.upload(
            name=fields.get("name"),
            category=fields.get("category"),
            description=fields.get("description"),
            latitude=fields.get("lat"),
            longitude=fields.get("lng"),
            image=image,
        )
        return "Asset uploaded successfully!"

    @post(
        "/upload-geojson",
        guards=[require_admin_guard],
        status_code=HTTP_200_OK,
        media_type=MediaType.TEXT,
    )
    async def upload_geojson(self, request: Request, asset_catalog: AssetCatalog) -> str:
        """Bulk import Point features from an uploaded GeoJSON file (``geojsonFile``)."""
        _, files = await read_fields(request)
        upload = files.get("geojsonFile")
        if upload is None:
            raise ValidationError("No file uploaded.")

        raw = await upload.read()
        try:
            collection = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            raise ValidationError("Invalid GeoJSON format.")

        count = await asset_catalog.bulk_import(collection)
        logger.info(f"GeoJSON upload {upload.filename!r} imported {count} asset(s)")
        return f"Successfully uploaded {count} assets."
