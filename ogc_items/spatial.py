# ============================================================================
# MODULE CONTEXT - SPATIAL PREDICATE BUILDER
# ============================================================================
# STATUS: Feature Engine - Stage 2 (bbox + bbox-crs -> envelope)
# PURPOSE: Turn an optional bounding box and its CRS into an envelope filter
# EXPORTS: SpatialPredicate, reduce_bbox, build_spatial_predicate
# DEPENDENCIES: dataclasses, ogc_common.models
# ============================================================================

"""
Spatial Predicate Builder

    bbox absent                 -> None
    bbox-crs code not integer   -> InvalidCrs
    6 numbers                   -> z values dropped (index 5, then index 2)
    not 4 numbers after that    -> None (filter dropped, logged)
    otherwise                   -> SpatialPredicate(xmin, ymin, xmax, ymax, srid)

The predicate only holds numbers; filters.EnvelopeIntersects renders them as
bind parameters.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ogc_common.models import Crs
from util_logger import ComponentType, LoggerFactory

logger = LoggerFactory.create_logger(ComponentType.ENGINE, "SpatialPredicateBuilder")


@dataclass(frozen=True)
class SpatialPredicate:
    """Rectangular envelope plus the SRID its coordinates are expressed in."""
    xmin: float
    ymin: float
    xmax: float
    ymax: float
    srid: int

    @property
    def envelope(self) -> Tuple[float, float, float, float]:
        return (self.xmin, self.ymin, self.xmax, self.ymax)


def reduce_bbox(bbox: Sequence[float]) -> List[float]:
    """
    Reduce a 3D bbox to 2D.

    [x0, y0, z0, x1, y1, z1] -> [x0, y0, x1, y1]; other lengths are returned
    unchanged (as a new list).
    """
    coords = [float(c) for c in bbox]
    if len(coords) == 6:
        # higher index first so the lower one does not shift
        del coords[5]
        del coords[2]
    return coords


def build_spatial_predicate(
    bbox: Optional[Sequence[float]],
    bbox_crs: Optional[Crs] = None
) -> Optional[SpatialPredicate]:
    """
    Build the envelope filter for a bbox query.

    Args:
        bbox: 4 or 6 numbers, or None
        bbox_crs: CRS the bbox is expressed in (EPSG:4326 when None)

    Returns:
        SpatialPredicate or None when no usable bbox was given

    Raises:
        InvalidCrs: bbox-crs code is not an integer SRID
    """
    if bbox is None:
        return None

    srid = (bbox_crs or Crs()).srid(parameter="bbox-crs")

    coords = reduce_bbox(bbox)
    if len(coords) != 4:
        logger.warning(f"Ignoring bbox with {len(bbox)} values; spatial filter dropped")
        return None

    xmin, ymin, xmax, ymax = coords
    return SpatialPredicate(xmin=xmin, ymin=ymin, xmax=xmax, ymax=ymax, srid=srid)
