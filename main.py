"""Main orchestrator for fleet geofence and location aggregation over snapshot files."""
import argparse
import json
import sys
from pathlib import Path

from loguru import logger

from configurations.config import Config
from models.fleet import HierarchyLevel
from tools.geofence_parser import extract_polygon_geofences, geofence_bounds, unwrap_geofence_response
from tools.location_aggregator import flatten, rollup, summarize_all
from services.vehicle_normalizer import group_into_locations
from visualization.geofence_export import GeofenceExporter

def configure_logging(level: str = Config.LOG_LEVEL) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())

def load_json(path: str):
    with open(path, encoding="utf-8") as f:
        return json.load(f)

class FleetSnapshotProcessor:
    """Runs the geofence and location aggregation steps over fetched snapshots."""

    def __init__(self, output_dir: str = None):
        self.exporter = GeofenceExporter(output_dir)

    def process(self, geofence_payload=None, vehicle_payload=None, level: str = "zone") -> dict:
        """Complete pipeline: unwrap → extract → group → summarize → roll up → export."""
        results = {'output_dir': self.exporter.export_dir}

        if geofence_payload is not None:
            logger.info("Extracting polygon geofences...")
            sites = unwrap_geofence_response(geofence_payload)
            geofences = extract_polygon_geofences(sites)
            self.exporter.prepare_geofences_geojson(geofences)
            results['geofences_geojson'] = self.exporter.export_geofences_geojson()
            results['num_sites'] = len(sites)
            results['num_geofences'] = len(geofences)
            results['bounds'] = geofence_bounds(geofences)

        if vehicle_payload is not None:
            logger.info("Grouping vehicles into the location hierarchy...")
            locations = group_into_locations(vehicle_payload)
            summaries = summarize_all(locations)
            rolled = rollup(summaries, HierarchyLevel.parse(level))
            self.exporter.prepare_summary_table(rolled)
            results['summary_csv'] = self.exporter.export_summary_csv(f"summary_{level.lower()}.csv")
            results['num_wards'] = len(locations)
            results['num_vehicles'] = len(flatten(locations))

        results['exported_files'] = self.exporter.exported_files()

        logger.success(f"Processing completed, results saved to {self.exporter.export_dir}")
        return results

def main():
    """Command line interface for the snapshot processor."""
    parser = argparse.ArgumentParser(description="Fleet geofence and location aggregation")
    parser.add_argument("--geofences", help="Path to a geofence catalog response (JSON)")
    parser.add_argument("--vehicles", help="Path to a vehicle telemetry response (JSON)")
    parser.add_argument("--level", default="zone",
                        choices=[level.name.lower() for level in HierarchyLevel],
                        help="Hierarchy level for the summary table")
    parser.add_argument("--output", default=None, help="Output directory")
    parser.add_argument("--log-level", default=Config.LOG_LEVEL, help="Log level")

    args = parser.parse_args()
    configure_logging(args.log_level)

    if not any([args.geofences, args.vehicles]):
        parser.error("at least one of --geofences or --vehicles is required")

    try:
        if args.output:
            Path(args.output).mkdir(parents=True, exist_ok=True)
        processor = FleetSnapshotProcessor(args.output)
        results = processor.process(
            geofence_payload=load_json(args.geofences) if args.geofences else None,
            vehicle_payload=load_json(args.vehicles) if args.vehicles else None,
            level=args.level
        )
    except Exception as e:
        logger.error(f"Processing failed: {e}")
        sys.exit(1)

    print("\nProcessing completed successfully!")
    for key, value in results.items():
        print(f"{key}: {value}")

if __name__ == "__main__":
    main()
