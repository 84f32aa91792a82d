"""Export geofences to GeoJSON and location summaries to CSV."""
import os
from typing import Iterable, List

import geopandas as gpd
import pandas as pd
from loguru import logger

from configurations.config import Config
from models.fleet import LocationSummary
from models.geofence import PolygonGeofence
from tools.location_aggregator import summaries_to_dataframe

class GeofenceExporter:
    def __init__(self, export_dir: str = None):
        self.geofences_gdf = None
        self.summary_df = None
        # Export directory lives outside the codebase
        self.export_dir = export_dir or Config.EXPORT_DIR
        os.makedirs(self.export_dir, exist_ok=True)

    def prepare_geofences_geojson(self, geofences: Iterable[PolygonGeofence]) -> gpd.GeoDataFrame:
        """Prepare polygon geofences for GeoJSON export."""
        features = []
        for geofence in geofences:
            features.append({
                'name': geofence.name,
                'num_vertices': len(geofence.coordinates),
                'is_degenerate': geofence.is_degenerate,
                'geometry': geofence.to_shapely()
            })

        self.geofences_gdf = gpd.GeoDataFrame(
            features,
            columns=['name', 'num_vertices', 'is_degenerate', 'geometry'],
            geometry='geometry',
            crs=Config.GEOFENCE_CRS
        )
        logger.info(f"Prepared {len(features)} geofences for export")
        return self.geofences_gdf

    def prepare_summary_table(self, summaries: Iterable[LocationSummary]) -> pd.DataFrame:
        self.summary_df = summaries_to_dataframe(summaries)
        logger.info(f"Prepared summary table with {len(self.summary_df)} rows")
        return self.summary_df

    def export_geofences_geojson(self, filename: str = "geofences.geojson") -> str:
        """Export geofences to a GeoJSON file in the export directory."""
        if self.geofences_gdf is None:
            raise ValueError("No geofence data prepared")

        output_path = os.path.join(self.export_dir, filename)
        self.geofences_gdf.to_file(output_path, driver='GeoJSON')
        logger.info(f"Exported geofences to {output_path}")
        return output_path

    def export_summary_csv(self, filename: str = "summary.csv") -> str:
        """Export location summaries to CSV in the export directory."""
        if self.summary_df is None:
            raise ValueError("No summary data prepared")

        output_path = os.path.join(self.export_dir, filename)
        self.summary_df.to_csv(output_path, index=False)
        logger.info(f"Exported summary to {output_path}")
        return output_path

    def exported_files(self) -> List[str]:
        return sorted(os.listdir(self.export_dir))
