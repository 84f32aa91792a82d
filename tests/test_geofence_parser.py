"""Unit tests for polygon geofence parsing and extraction."""
import math

import pytest
from shapely.geometry import Polygon

from models.geofence import GeofenceSite, PolygonGeofence, SiteKind, SiteType
from tools.geofence_parser import (
    extract_polygon_geofences,
    geofence_bounds,
    parse_polygon_latlng,
    unwrap_geofence_response,
)

class TestParsePolygonLatLng:
    def test_mixed_points(self):
        """Malformed entries are removed, the rest keep their order."""
        assert parse_polygon_latlng(["12.34,56.78", "bad", "1,2"]) == [(12.34, 56.78), (1.0, 2.0)]

    def test_well_formed_values_parse_exactly(self):
        result = parse_polygon_latlng(["28.4765123,77.5071234", "-33.8688,151.2093", " 10 , 20 "])
        assert result == [(28.4765123, 77.5071234), (-33.8688, 151.2093), (10.0, 20.0)]

    @pytest.mark.parametrize("point", ["", ",", "12.5", "12.5,", ",77.1", "a,b", "1,2,3", "nan,1", "1,inf"])
    def test_malformed_point_dropped(self, point):
        assert parse_polygon_latlng([point, "1,2"]) == [(1.0, 2.0)]

    def test_all_malformed_gives_empty(self):
        assert parse_polygon_latlng(["x", "", "1;2"]) == []

    def test_output_is_finite(self):
        result = parse_polygon_latlng(["1e308,1", "-inf,0", "3,4"])
        assert all(math.isfinite(lat) and math.isfinite(lng) for lat, lng in result)
        assert len(result) == 2

    def test_idempotent(self):
        points = ["12.34,56.78", "bad", "1,2"]
        assert parse_polygon_latlng(points) == parse_polygon_latlng(points)

class TestExtractPolygonGeofences:
    def setup_method(self):
        self.sites = [
            {'siteName': 'Depot', 'type': 'Polygon', 'latlong': ['1,1', '1,2', '2,2']},
            {'siteName': 'A', 'type': 'Point', 'latlong': ['1,1']},
            {'siteName': 'Landfill', 'type': 'Circle', 'latlong': ['5,5'], 'radius': 100},
            {'siteName': 'Empty', 'type': 'Polygon', 'latlong': []},
            {'siteName': 'Ward 7', 'type': 'Polygon', 'latlong': ['3,3', 'oops', '3,4', '4,4']},
        ]

    def test_only_polygon_sites_with_points(self):
        geofences = extract_polygon_geofences(self.sites)
        assert [g.name for g in geofences] == ['Depot', 'Ward 7']
        assert geofences[1].coordinates == ((3.0, 3.0), (3.0, 4.0), (4.0, 4.0))

    def test_point_site_excluded(self):
        assert extract_polygon_geofences([{'siteName': 'A', 'type': 'Point', 'latlong': ['1,1']}]) == []

    def test_accepts_site_instances(self):
        site = GeofenceSite(site_name='Yard', type=SiteType.parse('Polygon'), latlong=('0,0', '0,1', '1,1'))
        assert extract_polygon_geofences([site]) == [
            PolygonGeofence(name='Yard', coordinates=((0.0, 0.0), (0.0, 1.0), (1.0, 1.0)))
        ]

    def test_all_malformed_points_give_degenerate_polygon(self):
        geofences = extract_polygon_geofences([{'siteName': 'Bad', 'type': 'Polygon', 'latlong': ['x', 'y']}])
        assert len(geofences) == 1
        assert geofences[0].coordinates == ()
        assert geofences[0].is_degenerate

    def test_bad_radius_on_other_site_is_skipped(self):
        sites = [
            {'siteName': 'Depot', 'type': 'Polygon', 'latlong': ['1,1', '1,2', '2,2']},
            {'siteName': 'Bin', 'type': 'Circle', 'latlong': ['5,5'], 'radius': ''},
        ]
        assert [g.name for g in extract_polygon_geofences(sites)] == ['Depot']

    def test_unreadable_records_are_skipped(self):
        sites = [
            {'siteName': 'Depot', 'type': 'Polygon', 'latlong': ['1,1', '1,2', '2,2']},
            {'type': 'Point', 'latlong': ['5,5']},
            None,
            {'siteName': 'Yard', 'type': 'Polygon', 'latlong': ['3,3', '3,4', '4,4']},
        ]
        assert [g.name for g in extract_polygon_geofences(sites)] == ['Depot', 'Yard']

    def test_type_match_is_exact(self):
        assert extract_polygon_geofences([{'siteName': 'B', 'type': 'polygon', 'latlong': ['1,1']}]) == []

class TestSiteModels:
    def test_site_type_variants(self):
        assert SiteType.parse('Polygon').kind is SiteKind.POLYGON
        assert SiteType.parse('Point').kind is SiteKind.POINT
        assert SiteType.parse('Circle').kind is SiteKind.CIRCLE
        other = SiteType.parse('LineString')
        assert other.kind is SiteKind.OTHER
        assert other.raw == 'LineString'
        assert SiteType.parse(None).kind is SiteKind.OTHER

    def test_site_without_name_rejected(self):
        with pytest.raises(ValueError):
            GeofenceSite.from_dict({'type': 'Polygon', 'latlong': ['1,1']})

    def test_to_shapely_swaps_axis_order(self):
        geofence = PolygonGeofence('Depot', ((10.0, 20.0), (10.0, 21.0), (11.0, 21.0)))
        polygon = geofence.to_shapely()
        assert isinstance(polygon, Polygon)
        assert list(polygon.exterior.coords)[:3] == [(20.0, 10.0), (21.0, 10.0), (21.0, 11.0)]
        assert polygon.area > 0

    def test_degenerate_polygon_is_empty_geometry(self):
        assert PolygonGeofence('Line', ((1.0, 1.0), (2.0, 2.0))).to_shapely().is_empty

class TestCatalogHelpers:
    def test_unwrap_geofence_response(self):
        payload = {
            'data': {
                'siteParent': [
                    {'site': [{'siteName': 'A', 'type': 'Polygon', 'latlong': ['1,1'], 'siteType': 'Depot'}]},
                    {'site': [{'siteName': 'B', 'type': 'Circle', 'latlong': ['2,2'], 'radius': 50}]},
                    {'other': []},
                ]
            }
        }
        sites = unwrap_geofence_response(payload)
        assert [s.site_name for s in sites] == ['A', 'B']
        assert sites[0].site_type == 'Depot'
        assert sites[1].radius == 50.0

    def test_unwrap_skips_bad_site_records(self):
        payload = {'data': {'siteParent': [{'site': [
            None,
            'Depot',
            {'type': 'Polygon', 'latlong': ['1,1']},
            {'siteName': 'A', 'type': 'Polygon', 'latlong': ['1,1']},
            {'siteName': 'B', 'type': 'Circle', 'latlong': ['2,2'], 'radius': 'wide'},
        ]}]}}
        assert [s.site_name for s in unwrap_geofence_response(payload)] == ['A']

    @pytest.mark.parametrize("payload", [None, [], {}, {'data': None}, {'data': {'siteParent': 'x'}}])
    def test_unwrap_malformed_envelope(self, payload):
        assert unwrap_geofence_response(payload) == []

    def test_geofence_bounds(self):
        geofences = [
            PolygonGeofence('A', ((1.0, 5.0), (2.0, 6.0))),
            PolygonGeofence('Empty', ()),
            PolygonGeofence('B', ((-1.0, 7.0), (0.5, 4.0))),
        ]
        assert geofence_bounds(geofences) == (-1.0, 4.0, 2.0, 7.0)
        assert geofence_bounds([PolygonGeofence('Empty', ())]) is None
