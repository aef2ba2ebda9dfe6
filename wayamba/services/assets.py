"""Tourism asset catalog: single uploads, GeoJSON bulk import and read models."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wayamba.errors import ValidationError
from wayamba.geo import BoundaryGate
from wayamba.integrations import ImageHost, ImageUpload
from wayamba.models import TourismAsset
from wayamba.services.common import parse_coordinate, parse_point

logger = logging.getLogger("Wayamba.assets")

ASSET_IMAGE_FOLDER = "tourism-assets"
UNCATEGORIZED = "uncategorized"


def asset_to_feature(asset: TourismAsset) -> dict:
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [asset.longitude, asset.latitude]},
        "properties": {
            "id": str(asset.id),
            "name": asset.name,
            "category": asset.category,
            "description": asset.description,
            "image_url": asset.image_url,
        },
    }


class AssetCatalog:
    """Stores points of interest and serves them back as GeoJSON."""

    def __init__(self, session: AsyncSession, boundary: BoundaryGate, image_host: ImageHost):
        self.session = session
        self.boundary = boundary
        self.image_host = image_host

    async def upload(
        self,
        name: Optional[str],
        category: Optional[str],
        description: Optional[str],
        latitude: Any,
        longitude: Any,
        image: Optional[ImageUpload] = None,
    ) -> TourismAsset:
        """Create one asset. Same coordinate, boundary and image rules as feedback."""
        lat, lon = parse_point(latitude, longitude)
        self.boundary.require(lat, lon)
        if not name or not name.strip():
            raise ValidationError("Asset name is required.")

        image_url = None
        if image is not None:
            image_url = await self.image_host.upload(image, folder=ASSET_IMAGE_FOLDER)

        asset = TourismAsset(
            name=name.strip(),
            category=category or None,
            description=description or None,
            latitude=lat,
            longitude=lon,
            image_url=image_url,
        )
        self.session.add(asset)
        await self.session.commit()
        await self.session.refresh(asset)
        logger.info(f"Asset '{asset.name}' ({asset.category}) saved as {asset.id}")
        return asset

    def _skip_reason(self, feature: Any) -> Optional[str]:
        if not isinstance(feature, dict):
            return "feature is not an object"
        geometry = feature.get("geometry")
        if not isinstance(geometry, dict) or geometry.get("type") != "Point":
            return "geometry is not a Point"
        if not isinstance(feature.get("properties"), dict):
            return "properties are missing"
        coordinates = geometry.get("coordinates")
        if not isinstance(coordinates, (list, tuple)) or len(coordinates) < 2:
            return "coordinates are missing"
        lon = parse_coordinate(coordinates[0])
        lat = parse_coordinate(coordinates[1])
        if lat is None or lon is None:
            return "coordinates are not numeric"
        if not self.boundary.is_loaded:
            return "province boundary is not loaded"
        if not self.boundary.contains(lat, lon):
            return "point is outside the North Western Province"
        return None

    async def bulk_import(self, collection: Any) -> int:
        """
        Import every Point feature of a GeoJSON FeatureCollection.

        Features that cannot be used are skipped and logged. Each asset is
        committed on its own, so one failing insert does not undo the others.
        Returns the number of assets stored. Raises ``ValidationError`` only
        when the input is not a FeatureCollection.
        """
        if (
            not isinstance(collection, dict)
            or not isinstance(collection.get("features"), list)
            or collection.get("type", "FeatureCollection") != "FeatureCollection"
        ):
            raise ValidationError("Invalid GeoJSON format.")

        features = collection["features"]
        logger.info(f"Importing {len(features)} feature(s)")

        imported = 0
        for index, feature in enumerate(features):
            reason = self._skip_reason(feature)
            if reason:
                logger.warning(f"Skipping feature #{index}: {reason}")
                continue

            props = feature["properties"]
            lon, lat = (parse_coordinate(c) for c in feature["geometry"]["coordinates"][:2])
            asset = TourismAsset(
                name=props.get("name"),
                category=props.get("category"),
                description=props.get("description"),
                latitude=lat,
                longitude=lon,
            )
            try:
                self.session.add(asset)
                await self.session.commit()
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error(f"Could not store feature #{index} ({props.get('name')!r}): {e}")
                continue
            imported += 1

        logger.info(f"Import finished: {imported} of {len(features)} feature(s) stored")
        return imported

    async def list_all(self) -> List[TourismAsset]:
        result = await self.session.execute(select(TourismAsset).order_by(TourismAsset.created_at))
        return list(result.scalars().all())

    async def feature_collection(self) -> dict:
        """All assets as a GeoJSON FeatureCollection of Points."""
        assets = await self.list_all()
        return {
            "type": "FeatureCollection",
            "features": [asset_to_feature(a) for a in assets],
        }

    async def category_distribution(self) -> Dict[str, int]:
        result = await self.session.execute(
            select(TourismAsset.category, func.count(TourismAsset.id)).group_by(TourismAsset.category)
        )
        distribution: Dict[str, int] = {}
        for category, count in result.all():
            key = category or UNCATEGORIZED
            distribution[key] = distribution.get(key, 0) + count
        return distribution
